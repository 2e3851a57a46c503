from dataclasses import dataclass
from datetime import datetime, timedelta

from httping.duration import MILLISECOND, format_duration, truncate

FAILED_STATUS_CODE = 0


@dataclass(frozen=True)
class Sample:
    """Outcome of one probe. A probe that got no response carries FAILED_STATUS_CODE."""

    timestamp: datetime
    status_code: int
    latency: timedelta

    def to_row(self) -> list[str]:
        """Latency is truncated to milliseconds here only; the stored value keeps full resolution."""
        return [
            format_stamp_milli(self.timestamp),
            str(self.status_code),
            format_duration(truncate(self.latency, MILLISECOND)),
        ]


def format_stamp_milli(timestamp: datetime) -> str:
    """Fixed-width stamp like "Jan  2 15:04:05.000", with the day padded by a space."""
    return (
        f"{timestamp:%b} {timestamp.day:>2} {timestamp:%H:%M:%S}."
        f"{timestamp.microsecond // 1000:03d}"
    )

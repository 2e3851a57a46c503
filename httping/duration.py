import re
from datetime import timedelta

MICROSECOND = timedelta(microseconds=1)
MILLISECOND = timedelta(milliseconds=1)
MAX_NANOS = 2**63 - 1

_NANOS_PER_UNIT = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_TERM = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]+)")


def parse_duration(text: str) -> timedelta:
    """
    parse_duration turns strings like "500ms", "1.5s" or "1h30m" into a timedelta.

    A duration is an optional sign followed by one or more <number><unit> terms, where the
    number may carry a decimal fraction. A bare "0" needs no unit. Anything finer than a
    microsecond is truncated because timedelta cannot hold it, and anything past
    MAX_NANOS nanoseconds (about 2562047h) is out of range.
    """
    remaining = text
    sign = 1
    if remaining and remaining[0] in "+-":
        sign = -1 if remaining[0] == "-" else 1
        remaining = remaining[1:]

    if remaining == "0":
        return timedelta(0)
    if not remaining:
        raise ValueError(f"invalid duration {text!r}")

    total_nanos = 0
    position = 0
    while position < len(remaining):
        match = _TERM.match(remaining, position)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")

        whole, fraction, unit = match.groups()
        if not whole and not fraction:
            raise ValueError(f"missing digits in duration {text!r}")
        if unit not in _NANOS_PER_UNIT:
            raise ValueError(f"unknown unit {unit!r} in duration {text!r}")

        scale = _NANOS_PER_UNIT[unit]
        total_nanos += int(whole or "0") * scale
        if fraction:
            total_nanos += int(fraction) * scale // 10 ** len(fraction)
        if total_nanos > MAX_NANOS:
            raise ValueError(f"duration {text!r} is out of range")
        position = match.end()

    try:
        return timedelta(microseconds=sign * (total_nanos // 1_000))
    except OverflowError as e:
        raise ValueError(f"duration {text!r} is out of range") from e


def truncate(duration: timedelta, unit: timedelta) -> timedelta:
    """Rounds duration down to a multiple of unit."""
    return duration - duration % unit


def format_duration(duration: timedelta) -> str:
    """
    format_duration renders a duration as "1h2m3.5s", "1.204s", "50ms" or "12µs".

    Durations below one second use the largest sub-second unit that keeps the integer part
    non-zero; longer ones are split into hours, minutes and fractional seconds.
    """
    micros = duration // MICROSECOND
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_decimal(micros, 3)}ms"

    hours, rest = divmod(micros, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds = f"{_decimal(rest, 6)}s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"


def _decimal(value: int, digits: int) -> str:
    whole, fraction = divmod(value, 10**digits)
    fraction_text = f"{fraction:0{digits}d}".rstrip("0")
    if not fraction_text:
        return str(whole)
    return f"{whole}.{fraction_text}"

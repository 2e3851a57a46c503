import logging
import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Sequence
from urllib.parse import SplitResult, urlsplit

from dotenv import load_dotenv

from httping.duration import format_duration, parse_duration

load_dotenv()

MINIMUM_FREQUENCY = timedelta(milliseconds=500)
USAGE = "two args required: httping <url> <frequency> (1s, 500ms, etc.)"

_CONTROL_CHARACTER = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class ConfigError(ValueError):
    """Raised for invalid arguments or settings, before any probe is sent."""


@dataclass(frozen=True)
class ProbeConfig:
    url: str
    frequency: timedelta


@dataclass(frozen=True)
class Settings:
    """
    Immutable settings read from the environment (a .env file is honoured too).
    """

    log_level: str = field(default_factory=lambda: os.getenv("HTTPING_LOG_LEVEL", "INFO").upper())
    log_file: str | None = field(default_factory=lambda: os.getenv("HTTPING_LOG_FILE") or None)

    @property
    def level(self) -> int:
        level = logging.getLevelName(self.log_level)
        if not isinstance(level, int):
            raise ConfigError(f"{self.log_level} is not a valid log level")
        return level


def parse_args(args: Sequence[str]) -> ProbeConfig:
    """
    parse_args validates the two positional arguments: httping <url> <frequency>.

    The url needs a scheme and the frequency must be at least MINIMUM_FREQUENCY,
    so the request rate stays bounded.
    """
    if len(args) != 2:
        raise ConfigError(USAGE)
    raw_url, raw_frequency = args

    try:
        parts = _split_url(raw_url)
    except ValueError as e:
        raise ConfigError(f"{raw_url} is not a valid url") from e
    if not parts.scheme:
        raise ConfigError("protocol scheme required")

    try:
        frequency = parse_duration(raw_frequency)
    except ValueError as e:
        raise ConfigError(f"{raw_frequency} is not a valid duration") from e
    if frequency < MINIMUM_FREQUENCY:
        raise ConfigError(
            f"{format_duration(frequency)} is below the minimum frequency of "
            f"{format_duration(MINIMUM_FREQUENCY)}"
        )

    return ProbeConfig(url=parts.geturl(), frequency=frequency)


def _split_url(raw_url: str) -> SplitResult:
    # urlsplit quietly strips control characters and never checks escapes or host names.
    if _CONTROL_CHARACTER.search(raw_url):
        raise ValueError("invalid control character in url")
    if _BAD_ESCAPE.search(raw_url):
        raise ValueError("invalid percent escape in url")

    parts = urlsplit(raw_url)
    parts.port  # raises on a malformed port
    if parts.hostname and any(char.isspace() for char in parts.hostname):
        raise ValueError(f"invalid character in host name {parts.hostname!r}")
    return parts

"""Duration rounding, parsing and formatting.

Durations are integer nanoseconds throughout the engine. Text follows the
notation vegeta users already read in its own reports (``31ms``, ``30.9s``,
``2m0s``).
"""
import re

from src.const import HOUR, MICROSECOND, MILLISECOND, MINUTE, NANOSECOND, SECOND
from .exceptions import ConfigError

_UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,
    "μs": MICROSECOND,
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def round_duration(duration: int, multiple: int) -> int:
    """Round to the nearest multiple, halfway values away from zero."""
    if multiple <= 0:
        return duration
    quotient, remainder = divmod(abs(duration), multiple)
    if remainder + remainder >= multiple:
        quotient += 1
    rounded = quotient * multiple
    return -rounded if duration < 0 else rounded


def _fraction(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    if not rest:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{str(rest).zfill(width).rstrip('0')}"


def format_duration(duration: int) -> str:
    """
    Format nanoseconds the way Go prints a time.Duration.

    Args:
        duration: Duration in nanoseconds.

    Returns:
        Text such as ``0s``, ``750µs``, ``31ms``, ``30.9s`` or ``1h2m3s``.
    """
    if duration == 0:
        return "0s"
    magnitude = abs(duration)
    if magnitude < MICROSECOND:
        text = f"{magnitude}ns"
    elif magnitude < MILLISECOND:
        text = _fraction(magnitude, MICROSECOND) + "µs"
    elif magnitude < SECOND:
        text = _fraction(magnitude, MILLISECOND) + "ms"
    else:
        hours, rest = divmod(magnitude, HOUR)
        minutes, rest = divmod(rest, MINUTE)
        text = _fraction(rest, SECOND) + "s"
        if hours or minutes:
            text = f"{minutes}m{text}"
        if hours:
            text = f"{hours}h{text}"
    return "-" + text if duration < 0 else text


def smart_format(duration: int) -> str:
    """
    Format a duration compactly for comparison output.

        30.918273ms      -> 31ms
        30.918273645s    -> 30.9s
        1m30.918273645s  -> 91s
        -30.918273ms     -> -31ms

    Lossy, only ever used for display.
    """
    magnitude = abs(duration)
    if magnitude < SECOND:
        return format_duration(round_duration(duration, MILLISECOND))
    if magnitude < MINUTE:
        return format_duration(round_duration(duration, 100 * MILLISECOND))
    return f"{duration / SECOND:.0f}s"


def parse_duration(text: str) -> int:
    """
    Parse a Go duration string such as ``30ms``, ``1.5s`` or ``1m30s``.

    Args:
        text: Duration text, optionally signed; a bare ``0`` is accepted.

    Returns:
        Duration in nanoseconds.

    Raises:
        ConfigError: If the text is not a valid duration.
    """
    value = text.strip()
    sign = 1
    if value[:1] in ("-", "+"):
        sign = -1 if value[0] == "-" else 1
        value = value[1:]
    if value == "0":
        return 0
    if not value:
        raise ConfigError(f"invalid duration {text!r}")

    total = 0
    position = 0
    for match in _COMPONENT.finditer(value):
        if match.start() != position:
            raise ConfigError(f"invalid duration {text!r}")
        number, unit = match.groups()
        whole, _, fraction = number.partition(".")
        scale = _UNITS[unit]
        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        position = match.end()
    if position != len(value):
        raise ConfigError(f"invalid duration {text!r}")
    return sign * total

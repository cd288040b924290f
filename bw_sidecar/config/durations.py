"""Duration string parsing for interval settings such as `2m` or `1h30m`."""

from __future__ import annotations

import logging
import re
from typing import Final

logger = logging.getLogger(__name__)

_UNIT_SECONDS: Final[dict[str, float]] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
# `ms` must be tried before `m` and `s`.
_DURATION_GROUP_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)"
)


def config_parse_duration(value: str) -> float:
    """Parse a duration string into seconds.

    Accepted grammar: optional sign, then one or more `<decimal><unit>`
    groups with units `ns`, `us`, `µs`, `ms`, `s`, `m`, `h`. A bare `0` is
    also accepted.

    Args:
        value: Duration text, for example `2m`, `1.5s` or `1h30m`.

    Returns:
        float: Duration in seconds (may be negative when signed).

    Raises:
        ValueError: Raised when the text does not match the grammar.
    """

    text = value.strip()
    sign = 1.0
    if text and text[0] in "+-":
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    if text == "0":
        return 0.0
    if not text:
        raise ValueError(f"invalid duration {value!r}")

    total_seconds = 0.0
    position = 0
    while position < len(text):
        group_match = _DURATION_GROUP_PATTERN.match(text, position)
        if group_match is None:
            raise ValueError(f"invalid duration {value!r}")
        total_seconds += float(group_match.group(1)) * _UNIT_SECONDS[group_match.group(2)]
        position = group_match.end()

    return sign * total_seconds


def config_parse_duration_or_default(
    value: str,
    default_seconds: float,
    setting_name: str,
    allow_zero: bool = False,
) -> float:
    """Parse a duration setting, falling back to a default on invalid input.

    Args:
        value: Raw duration text from configuration.
        default_seconds: Fallback used for unparsable or out-of-range values.
        setting_name: Environment variable name used in the warning.
        allow_zero: Whether a zero duration is acceptable.

    Returns:
        float: Parsed duration, or the default when the value is unusable.

    Raises:
        RuntimeError: This helper does not raise; bad input only logs a warning.
    """

    try:
        parsed_seconds = config_parse_duration(value)
    except ValueError as error:
        logger.warning(
            "Invalid format for %s %r, using default of %s: %s",
            setting_name,
            value,
            config_format_duration(default_seconds),
            error,
        )
        return default_seconds

    if parsed_seconds < 0 or (parsed_seconds == 0 and not allow_zero):
        logger.warning(
            "Out-of-range value for %s %r, using default of %s",
            setting_name,
            value,
            config_format_duration(default_seconds),
        )
        return default_seconds
    return parsed_seconds


def config_format_duration(seconds: float) -> str:
    """Render seconds as a compact duration string for log lines.

    Args:
        seconds: Duration in seconds.

    Returns:
        str: Text such as `2m0s`, `1s` or `10ms`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if seconds < 1:
        return f"{seconds * 1000:g}ms"
    whole_minutes, remainder_seconds = divmod(seconds, 60)
    hours, minutes = divmod(int(whole_minutes), 60)
    if hours:
        return f"{hours}h{minutes}m{remainder_seconds:g}s"
    if minutes:
        return f"{minutes}m{remainder_seconds:g}s"
    return f"{remainder_seconds:g}s"

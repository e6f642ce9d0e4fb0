"""
Duration string parsing.

Durations use the notation of Go's ``time.ParseDuration``, which is what
cluster tooling writes into resources: a possibly signed sequence of decimal
numbers, each with an optional fraction and a mandatory unit, such as
``300ms``, ``-1.5h`` or ``2h45m``. Valid units are ``ns``, ``us`` (or ``µs``),
``ms``, ``s``, ``m`` and ``h``. The bare string ``0`` is also accepted.
"""

import re
from decimal import Decimal

NANOSECONDS_PER_UNIT = {
    "ns": Decimal(1),
    "us": Decimal(1_000),
    "µs": Decimal(1_000),  # micro sign
    "μs": Decimal(1_000),  # Greek mu
    "ms": Decimal(1_000_000),
    "s": Decimal(1_000_000_000),
    "m": Decimal(60_000_000_000),
    "h": Decimal(3_600_000_000_000),
}

# Largest duration representable as a signed 64-bit nanosecond count
MAX_DURATION_NANOSECONDS = Decimal(2**63 - 1)

_COMPONENT = re.compile(r"([0-9]+\.?[0-9]*|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")
_DIGITS = frozenset("0123456789")


class DurationParseError(ValueError):
    """Raised when a string is not a valid duration."""

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f'time: {reason} duration "{text}"')
        self.text = text
        self.reason = reason


def parse_duration(text: str) -> int:
    """
    Parse a Go-style duration string into nanoseconds.

    Args:
        text: Duration such as "90s" or "1h30m"

    Returns:
        Signed duration in nanoseconds (fractions of a nanosecond are truncated)

    Raises:
        DurationParseError: If the text is not a valid duration
    """
    if not isinstance(text, str):
        raise DurationParseError(str(text), "invalid")

    remainder = text
    negative = False
    if remainder[:1] in ("-", "+"):
        negative = remainder[0] == "-"
        remainder = remainder[1:]

    if remainder == "0":
        return 0
    if not remainder:
        raise DurationParseError(text, "invalid")

    total = Decimal(0)
    position = 0
    while position < len(remainder):
        match = _COMPONENT.match(remainder, position)
        if match is None:
            if remainder[position] in _DIGITS or remainder[position] == ".":
                raise DurationParseError(text, "missing unit in")
            raise DurationParseError(text, "invalid")
        total += Decimal(match.group(1)) * NANOSECONDS_PER_UNIT[match.group(2)]
        position = match.end()

    # The negative range reaches one nanosecond further than the positive one
    limit = MAX_DURATION_NANOSECONDS + 1 if negative else MAX_DURATION_NANOSECONDS
    if total > limit:
        raise DurationParseError(text, "invalid")

    nanoseconds = int(total)
    return -nanoseconds if negative else nanoseconds


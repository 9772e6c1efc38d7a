"""Human-readable duration strings.

A duration is one or more ``<number><unit>`` terms, optionally separated by
whitespace or ``+``: ``"5s"``, ``"200ms"``, ``"1m 30s"``, ``"1h+15m"``,
``"1.5s"``. Values are resolved to integer nanoseconds.
"""

import re
from decimal import Decimal, InvalidOperation

NANOS_PER_SECOND = 1_000_000_000

UNIT_NANOS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "ms": 1_000_000,
    "s": NANOS_PER_SECOND,
    "sec": NANOS_PER_SECOND,
    "secs": NANOS_PER_SECOND,
    "second": NANOS_PER_SECOND,
    "seconds": NANOS_PER_SECOND,
    "m": 60 * NANOS_PER_SECOND,
    "min": 60 * NANOS_PER_SECOND,
    "mins": 60 * NANOS_PER_SECOND,
    "minute": 60 * NANOS_PER_SECOND,
    "minutes": 60 * NANOS_PER_SECOND,
    "h": 3600 * NANOS_PER_SECOND,
    "hr": 3600 * NANOS_PER_SECOND,
    "hour": 3600 * NANOS_PER_SECOND,
    "hours": 3600 * NANOS_PER_SECOND,
    "d": 86400 * NANOS_PER_SECOND,
    "day": 86400 * NANOS_PER_SECOND,
    "days": 86400 * NANOS_PER_SECOND,
    "w": 604800 * NANOS_PER_SECOND,
    "week": 604800 * NANOS_PER_SECOND,
    "weeks": 604800 * NANOS_PER_SECOND,
}

_TERM_RE = re.compile(r"\s*(\d+(?:\.\d+)?)\s*([a-zµ]+)\s*\+?", re.IGNORECASE)


def parse_duration(text: str) -> int:
    """Parse ``text`` into nanoseconds, raising ``ValueError`` if it is not a duration."""
    source = text.strip()
    if not source:
        raise ValueError("empty duration")

    total = Decimal(0)
    position = 0
    while position < len(source):
        match = _TERM_RE.match(source, position)
        if match is None:
            raise ValueError(f"invalid duration {text!r} at offset {position}")
        number, unit = match.groups()
        scale = UNIT_NANOS.get(unit.lower())
        if scale is None:
            raise ValueError(f"unknown duration unit {unit!r} in {text!r}")
        try:
            total += Decimal(number) * scale
        except InvalidOperation as exc:
            raise ValueError(f"invalid duration {text!r}") from exc
        position = match.end()

    if source.endswith("+"):
        raise ValueError(f"invalid duration {text!r}")
    return int(total)

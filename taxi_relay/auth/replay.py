import math
import re

from ..errors import MalformedTimestamp, StaleTimestamp

# Plain ASCII decimal with optional fraction and exponent; float() alone also
# accepts underscores and non-ASCII digits.
TIMESTAMP_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", re.ASCII)


def parse_timestamp(raw: str) -> float:
    """Parse an ``x-timestamp`` header value as seconds since the epoch."""
    if not isinstance(raw, str) or not TIMESTAMP_PATTERN.fullmatch(raw.strip()):
        raise MalformedTimestamp(f"Timestamp {raw!r} is not a number")
    value = float(raw)
    if not math.isfinite(value):
        raise MalformedTimestamp(f"Timestamp {raw!r} is not finite")
    return value


def check_freshness(timestamp: float, now: float, window: float) -> None:
    """Raise StaleTimestamp when the timestamp is more than ``window`` seconds from ``now``.

    The boundary is inclusive: a drift of exactly ``window`` is accepted.
    """
    drift = abs(now - timestamp)
    if drift > window:
        raise StaleTimestamp(f"Timestamp drift {drift:.0f}s exceeds window {window:.0f}s")

"""
Timestamp normalization for trajectory samples and object markers.

Raw timestamps arrive as epoch numbers in seconds, milliseconds or
microseconds, as numeric strings, as ISO-8601 strings, or as a "missing"
sentinel. Other date strings are accepted only when they name a full
calendar date, so no field is ever filled in from the current date.
Everything is normalized to epoch milliseconds. Parsing is total
through `classify_timestamp`; `parse_timestamp` raises `InvalidTimestamp`
so that callers choose their own fallback explicitly.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

MISSING_SENTINELS = frozenset({"", "n/a", "na", "null", "none", "nan"})

MICROS_RANGE = (1e15, 1e16)
MILLIS_RANGE = (1e11, 1e15)
SECONDS_RANGE = (1e8, 1e11)

_NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


class TimestampKind(str, Enum):
    MISSING = "missing"
    EPOCH_SECONDS = "epoch_seconds"
    EPOCH_MILLIS = "epoch_millis"
    EPOCH_MICROS = "epoch_micros"
    ISO8601 = "iso8601"
    DATE_STRING = "date_string"
    UNPARSEABLE = "unparseable"


class InvalidTimestamp(ValueError):
    def __init__(self, raw: Any, kind: TimestampKind) -> None:
        super().__init__(f"Invalid timestamp ({kind.value}): {raw!r}")
        self.raw = raw
        self.kind = kind


@dataclass(frozen=True)
class ParsedTimestamp:
    raw: Any
    kind: TimestampKind
    epoch_ms: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.epoch_ms is not None


def _classify_number(raw: Any, value: float) -> ParsedTimestamp:
    if math.isnan(value):
        return ParsedTimestamp(raw, TimestampKind.MISSING)
    if math.isinf(value):
        return ParsedTimestamp(raw, TimestampKind.UNPARSEABLE)
    mag = abs(value)
    if MICROS_RANGE[0] <= mag < MICROS_RANGE[1]:
        return ParsedTimestamp(raw, TimestampKind.EPOCH_MICROS, float(value) / 1000.0)
    if MILLIS_RANGE[0] <= mag < MILLIS_RANGE[1]:
        return ParsedTimestamp(raw, TimestampKind.EPOCH_MILLIS, float(value))
    if SECONDS_RANGE[0] <= mag < SECONDS_RANGE[1]:
        return ParsedTimestamp(raw, TimestampKind.EPOCH_SECONDS, float(value) * 1000.0)
    return ParsedTimestamp(raw, TimestampKind.UNPARSEABLE)


# Two defaults differing in every date field: a free-form string that parses
# differently under them left some part of its date unspecified.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def _parse_iso(text: str) -> Optional[datetime]:
    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        return None


def _parse_date_string(text: str) -> Optional[datetime]:
    try:
        a = date_parser.parse(text, default=_DEFAULT_A)
        b = date_parser.parse(text, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None
    if a != b:
        logger.debug("Incomplete date string rejected: %r", text)
        return None
    return a


def classify_timestamp(raw: Any) -> ParsedTimestamp:
    """Sniff the representation of `raw` and normalize it to epoch milliseconds.

    Never raises. Numeric values are classified by magnitude: roughly
    [1e15, 1e16) as microseconds, [1e11, 1e15) as milliseconds and
    [1e8, 1e11) as seconds. Naive date-times are taken as UTC.
    """
    if raw is None:
        return ParsedTimestamp(raw, TimestampKind.MISSING)
    if isinstance(raw, bool):
        return ParsedTimestamp(raw, TimestampKind.UNPARSEABLE)
    if isinstance(raw, (int, float)):
        return _classify_number(raw, float(raw))
    if isinstance(raw, datetime):
        dt = raw if raw.tzinfo is not None else raw.replace(tzinfo=timezone.utc)
        return ParsedTimestamp(raw, TimestampKind.ISO8601, dt.timestamp() * 1000.0)
    if not isinstance(raw, str):
        return ParsedTimestamp(raw, TimestampKind.UNPARSEABLE)

    text = raw.strip()
    if text.lower() in MISSING_SENTINELS:
        return ParsedTimestamp(raw, TimestampKind.MISSING)
    if _NUMERIC_RE.match(text):
        return _classify_number(raw, float(text))

    kind = TimestampKind.ISO8601
    dt = _parse_iso(text)
    if dt is None:
        kind = TimestampKind.DATE_STRING
        dt = _parse_date_string(text)
    if dt is None:
        logger.debug("Unparseable timestamp: %r", raw)
        return ParsedTimestamp(raw, TimestampKind.UNPARSEABLE)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return ParsedTimestamp(raw, kind, dt.timestamp() * 1000.0)


def parse_timestamp(raw: Any) -> float:
    parsed = classify_timestamp(raw)
    if parsed.epoch_ms is None:
        raise InvalidTimestamp(raw, parsed.kind)
    return parsed.epoch_ms


def try_parse_timestamp(raw: Any) -> Optional[float]:
    return classify_timestamp(raw).epoch_ms


def time_difference_s(t1: Any, t2: Any) -> float:
    """Signed difference `t2 - t1` in seconds."""
    return (parse_timestamp(t2) - parse_timestamp(t1)) / 1000.0


def format_time_difference(seconds: float) -> str:
    if seconds < 0:
        return f"{abs(seconds):.1f}s before"
    return f"{seconds:.1f}s after"

from .ordering import OrderedTrajectory, OrderingBasis, resolve_ordering, sort_by_frame_index
from .timestamps import (
    InvalidTimestamp,
    ParsedTimestamp,
    TimestampKind,
    classify_timestamp,
    format_time_difference,
    parse_timestamp,
    time_difference_s,
    try_parse_timestamp,
)

__all__ = [
    "InvalidTimestamp",
    "OrderedTrajectory",
    "OrderingBasis",
    "ParsedTimestamp",
    "TimestampKind",
    "classify_timestamp",
    "format_time_difference",
    "parse_timestamp",
    "resolve_ordering",
    "sort_by_frame_index",
    "time_difference_s",
    "try_parse_timestamp",
]

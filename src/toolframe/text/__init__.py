"""Text helpers shared by read-style capabilities."""

from .line_range import LineRange, LineRangeLike, describe_line_range, filter_by_line_range, validate_line_range

__all__ = ["LineRange", "LineRangeLike", "describe_line_range", "filter_by_line_range", "validate_line_range"]

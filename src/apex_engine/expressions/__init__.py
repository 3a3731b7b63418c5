"""Locations, ranges and the structured expressions that produce them."""

from .exprs import (
    AfterExpr,
    CharLocExpr,
    ChoiceExpr,
    EndRelCharLocExpr,
    EndRelLineLocExpr,
    EvalResult,
    Expression,
    GridLocExpr,
    LineLocExpr,
    PatternCompileError,
    PatternRangeExpr,
    StartRelCharLocExpr,
    StartRelLineLocExpr,
    TwoPointRangeExpr,
    evaluate,
)
from .locations import (
    AnyLocation,
    EndRelativeLocation,
    Location,
    StartRelativeLocation,
    validate,
)
from .ranges import PatternRange, Range, cursor_point, span_range, whole_buffer

__all__ = [
    "Location",
    "AnyLocation",
    "StartRelativeLocation",
    "EndRelativeLocation",
    "validate",
    "Range",
    "PatternRange",
    "span_range",
    "whole_buffer",
    "cursor_point",
    "Expression",
    "EvalResult",
    "PatternCompileError",
    "CharLocExpr",
    "StartRelCharLocExpr",
    "EndRelCharLocExpr",
    "LineLocExpr",
    "StartRelLineLocExpr",
    "EndRelLineLocExpr",
    "GridLocExpr",
    "TwoPointRangeExpr",
    "PatternRangeExpr",
    "ChoiceExpr",
    "AfterExpr",
    "evaluate",
]

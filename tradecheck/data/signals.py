"""
Closed signal vocabularies.

Every enumerated field of a trade setup is one of these enums, so an
unknown trend or pattern cannot reach the scorers.
"""

from __future__ import annotations

from enum import Enum


class InvalidPrecondition(ValueError):
    """Input violates the data model (unknown enum value, wrong list arity...)."""


class Direction(Enum):
    LONG = "long"
    SHORT = "short"


class Trend(Enum):
    UP = "up"
    DOWN = "down"
    SIDEWAYS = "sideways"


class RsiLevel(Enum):
    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    NORMAL = "normal"


class CrossState(Enum):
    CROSS_UP = "cross_up"
    CROSS_DOWN = "cross_down"
    NONE = "none"


class Timeframe(Enum):
    H4 = "4h"
    DAY = "day"
    WEEK = "week"


class PatternSpan(Enum):
    SHORT = "short"  # up to 1 week
    MEDIUM = "medium"  # 1-4 weeks
    LONG = "long"  # over 4 weeks


class BreakoutDir(Enum):
    UP = "up"  # broke the upper boundary
    DOWN = "down"  # broke the lower boundary
    NONE = "none"


class PatternName(Enum):
    HEAD_SHOULDERS_TOP = "head_shoulders_top"
    HEAD_SHOULDERS_BOTTOM = "head_shoulders_bottom"
    FLAG_UP = "flag_up"
    FLAG_DOWN = "flag_down"
    TRIANGLE_CONVERGING = "triangle_converging"
    TRIANGLE_DIVERGING = "triangle_diverging"
    DOUBLE_TOP = "double_top"
    DOUBLE_BOTTOM = "double_bottom"
    NONE = "none"


# Display labels used by reports and contradiction messages
TIMEFRAME_LABELS: dict[Timeframe, str] = {
    Timeframe.H4: "4H",
    Timeframe.DAY: "Daily",
    Timeframe.WEEK: "Weekly",
}

SPAN_LABELS: dict[PatternSpan, str] = {
    PatternSpan.SHORT: "short-term (<=1 week)",
    PatternSpan.MEDIUM: "medium-term (1-4 weeks)",
    PatternSpan.LONG: "long-term (>4 weeks)",
}

PATTERN_LABELS: dict[PatternName, str] = {
    PatternName.HEAD_SHOULDERS_TOP: "Head & Shoulders Top",
    PatternName.HEAD_SHOULDERS_BOTTOM: "Head & Shoulders Bottom",
    PatternName.FLAG_UP: "Bull Flag",
    PatternName.FLAG_DOWN: "Bear Flag",
    PatternName.TRIANGLE_CONVERGING: "Converging Triangle",
    PatternName.TRIANGLE_DIVERGING: "Diverging Triangle",
    PatternName.DOUBLE_TOP: "Double Top",
    PatternName.DOUBLE_BOTTOM: "Double Bottom",
    PatternName.NONE: "None",
}

BREAKOUT_LABELS: dict[BreakoutDir, str] = {
    BreakoutDir.UP: "broke upper boundary",
    BreakoutDir.DOWN: "broke lower boundary",
    BreakoutDir.NONE: "no breakout",
}

"""
Signal normalization helpers.

Turns raw direction/trend/pattern tokens (English or the Chinese terms
traders type into the input forms) into the closed enums, and provides
the canonical comparisons shared by the scorers and the contradiction
rules.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional, TypeVar, Union

from tradecheck.data.signals import (
    BreakoutDir,
    CrossState,
    Direction,
    InvalidPrecondition,
    PatternName,
    PatternSpan,
    RsiLevel,
    Timeframe,
    Trend,
)

if TYPE_CHECKING:
    from tradecheck.data.trade_analysis import PricePattern, TradeAnalysis

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# Alias tables, keyed by the squashed token (see _squash)
DIRECTION_ALIASES = {
    "多": Direction.LONG,
    "多单": Direction.LONG,
    "buy": Direction.LONG,
    "空": Direction.SHORT,
    "空单": Direction.SHORT,
    "sell": Direction.SHORT,
}

TREND_ALIASES = {
    "上升": Trend.UP,
    "上涨": Trend.UP,
    "bullish": Trend.UP,
    "下降": Trend.DOWN,
    "下跌": Trend.DOWN,
    "bearish": Trend.DOWN,
    "横盘": Trend.SIDEWAYS,
    "flat": Trend.SIDEWAYS,
    "range": Trend.SIDEWAYS,
}

RSI_ALIASES = {
    "超买": RsiLevel.OVERBOUGHT,
    "超卖": RsiLevel.OVERSOLD,
    "正常": RsiLevel.NORMAL,
    "neutral": RsiLevel.NORMAL,
}

CROSS_ALIASES = {
    "向上穿越": CrossState.CROSS_UP,
    "上穿": CrossState.CROSS_UP,
    "up": CrossState.CROSS_UP,
    "向下穿越": CrossState.CROSS_DOWN,
    "下穿": CrossState.CROSS_DOWN,
    "down": CrossState.CROSS_DOWN,
    "未穿越": CrossState.NONE,
}

TIMEFRAME_ALIASES = {
    "4小时": Timeframe.H4,
    "tf4h": Timeframe.H4,
    "240": Timeframe.H4,
    "日线": Timeframe.DAY,
    "daily": Timeframe.DAY,
    "1d": Timeframe.DAY,
    "tfday": Timeframe.DAY,
    "周线": Timeframe.WEEK,
    "weekly": Timeframe.WEEK,
    "1w": Timeframe.WEEK,
    "tfweek": Timeframe.WEEK,
}

SPAN_ALIASES = {
    "短期": PatternSpan.SHORT,
    "短": PatternSpan.SHORT,
    "中期": PatternSpan.MEDIUM,
    "中": PatternSpan.MEDIUM,
    "mid": PatternSpan.MEDIUM,
    "长期": PatternSpan.LONG,
    "长": PatternSpan.LONG,
}

BREAKOUT_ALIASES = {
    "向上": BreakoutDir.UP,
    "上沿": BreakoutDir.UP,
    "上": BreakoutDir.UP,
    "向下": BreakoutDir.DOWN,
    "下沿": BreakoutDir.DOWN,
    "下": BreakoutDir.DOWN,
    "未突破": BreakoutDir.NONE,
    "无": BreakoutDir.NONE,
    "0": BreakoutDir.NONE,
}

PATTERN_ALIASES = {
    "头肩顶": PatternName.HEAD_SHOULDERS_TOP,
    "headandshoulderstop": PatternName.HEAD_SHOULDERS_TOP,
    "头肩底": PatternName.HEAD_SHOULDERS_BOTTOM,
    "headandshouldersbottom": PatternName.HEAD_SHOULDERS_BOTTOM,
    "inverseheadandshoulders": PatternName.HEAD_SHOULDERS_BOTTOM,
    "向上旗形": PatternName.FLAG_UP,
    "bullflag": PatternName.FLAG_UP,
    "向下旗形": PatternName.FLAG_DOWN,
    "bearflag": PatternName.FLAG_DOWN,
    "三角形（收敛）": PatternName.TRIANGLE_CONVERGING,
    "收敛三角形": PatternName.TRIANGLE_CONVERGING,
    "三角形（发散）": PatternName.TRIANGLE_DIVERGING,
    "发散三角形": PatternName.TRIANGLE_DIVERGING,
    "双重顶": PatternName.DOUBLE_TOP,
    "双重底": PatternName.DOUBLE_BOTTOM,
    "无": PatternName.NONE,
}

BULLISH_PATTERNS = frozenset({
    PatternName.HEAD_SHOULDERS_BOTTOM,
    PatternName.FLAG_UP,
    PatternName.DOUBLE_BOTTOM,
})

BEARISH_PATTERNS = frozenset({
    PatternName.HEAD_SHOULDERS_TOP,
    PatternName.FLAG_DOWN,
    PatternName.DOUBLE_TOP,
})

TRIANGLE_PATTERNS = frozenset({
    PatternName.TRIANGLE_CONVERGING,
    PatternName.TRIANGLE_DIVERGING,
})


def _squash(token: str) -> str:
    """Lower-case and drop whitespace, '_' and '-' so 'Cross Up' == 'cross_up'."""
    return re.sub(r"[\s_\-]+", "", token).lower()


def _parse(
    enum_cls: type[E],
    value: Union[E, str],
    aliases: dict[str, E],
    label: str,
) -> E:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = _squash(value)
        if key in aliases:
            return aliases[key]
        for member in enum_cls:
            if key in (_squash(member.value), _squash(member.name)):
                return member
    raise InvalidPrecondition(f"Unrecognized {label}: {value!r}")


def parse_direction(value: Union[Direction, str]) -> Direction:
    return _parse(Direction, value, DIRECTION_ALIASES, "open direction")


def parse_trend(value: Union[Trend, str]) -> Trend:
    return _parse(Trend, value, TREND_ALIASES, "trend")


def parse_rsi_level(value: Union[RsiLevel, str]) -> RsiLevel:
    return _parse(RsiLevel, value, RSI_ALIASES, "RSI level")


def parse_cross_state(value: Union[CrossState, str]) -> CrossState:
    return _parse(CrossState, value, CROSS_ALIASES, "KST cross state")


def parse_timeframe(value: Union[Timeframe, str]) -> Timeframe:
    return _parse(Timeframe, value, TIMEFRAME_ALIASES, "timeframe")


def parse_pattern_span(value: Union[PatternSpan, str]) -> PatternSpan:
    return _parse(PatternSpan, value, SPAN_ALIASES, "pattern timeframe span")


def parse_breakout(value: Union[BreakoutDir, str, None]) -> BreakoutDir:
    if value is None:
        return BreakoutDir.NONE
    return _parse(BreakoutDir, value, BREAKOUT_ALIASES, "breakout direction")


def parse_pattern_name(value: Union[PatternName, str]) -> PatternName:
    return _parse(PatternName, value, PATTERN_ALIASES, "price pattern")


def aligned_trend(direction: Direction) -> Trend:
    """The trend a position in ``direction`` wants to see."""
    return Trend.UP if direction == Direction.LONG else Trend.DOWN


def trend_for_span(record: "TradeAnalysis", span: PatternSpan) -> Trend:
    """Dow trend of the same duration class as a chart pattern."""
    if span == PatternSpan.LONG:
        return record.long_trend
    if span == PatternSpan.MEDIUM:
        return record.mid_trend
    return record.short_trend


def is_bullish(name: PatternName) -> bool:
    return name in BULLISH_PATTERNS


def is_bearish(name: PatternName) -> bool:
    return name in BEARISH_PATTERNS


def is_triangle(name: PatternName) -> bool:
    return name in TRIANGLE_PATTERNS


def normalize_patterns(
    patterns: Iterable["PricePattern"],
) -> tuple["PricePattern", ...]:
    """Apply the NONE-sentinel rule to a pattern selection.

    Selecting NONE discards everything chosen before it and ends the
    selection, so the result is either ``(NONE,)`` or a tuple with no NONE
    entry. An empty selection is the same as choosing NONE.
    """
    from tradecheck.data.trade_analysis import PricePattern

    selected: list[PricePattern] = []
    for pattern in patterns:
        if pattern.name == PatternName.NONE:
            return (PricePattern.none(),)
        selected.append(pattern)
    if not selected:
        return (PricePattern.none(),)
    return tuple(selected)


def stop_loss_rate(
    direction: Direction,
    open_price: float,
    stop_loss: float,
    coin: Optional[str] = None,
) -> float:
    """Distance from entry to stop as a percentage of the entry price.

    A stop on the wrong side of the entry (at or above it for a long, at or
    below it for a short) is still measured but logged as a warning.
    """
    if direction == Direction.LONG:
        if stop_loss >= open_price:
            logger.warning(
                "%s long stop %.4f is not below entry %.4f",
                coin or "Setup", stop_loss, open_price,
            )
        return abs((open_price - stop_loss) / open_price) * 100
    if stop_loss <= open_price:
        logger.warning(
            "%s short stop %.4f is not above entry %.4f",
            coin or "Setup", stop_loss, open_price,
        )
    return abs((stop_loss - open_price) / open_price) * 100

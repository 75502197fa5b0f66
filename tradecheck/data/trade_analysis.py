"""
Trade setup data model.

A ``TradeAnalysis`` is the single record the scorers and the contradiction
analyzer read: entry parameters, Dow trends, RSI state, chart patterns and
the multi-timeframe EMA/KST readings. It is built once and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Union

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
from tradecheck.utils.normalize import (
    is_triangle,
    normalize_patterns,
    parse_breakout,
    parse_cross_state,
    parse_direction,
    parse_pattern_name,
    parse_pattern_span,
    parse_rsi_level,
    parse_timeframe,
    parse_trend,
)
from tradecheck.utils.normalize import stop_loss_rate as compute_stop_loss_rate

KST_PERIOD_COUNT = 4


@dataclass(frozen=True)
class PricePattern:
    """A chart pattern the trader has identified."""

    name: PatternName
    timeframe_span: PatternSpan = PatternSpan.SHORT
    breakout_dir: BreakoutDir = BreakoutDir.NONE  # triangles only

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", parse_pattern_name(self.name))
        object.__setattr__(self, "timeframe_span", parse_pattern_span(self.timeframe_span))
        object.__setattr__(self, "breakout_dir", parse_breakout(self.breakout_dir))
        if not is_triangle(self.name) and self.breakout_dir != BreakoutDir.NONE:
            raise InvalidPrecondition(
                f"Breakout direction only applies to triangles, got {self.name.value} "
                f"with breakout {self.breakout_dir.value}"
            )

    @classmethod
    def none(cls) -> "PricePattern":
        """The 'no pattern selected' sentinel."""
        return cls(PatternName.NONE, PatternSpan.SHORT, BreakoutDir.NONE)

    @property
    def is_sentinel(self) -> bool:
        return self.name == PatternName.NONE


@dataclass(frozen=True)
class EMAReading:
    """EMA state on one chart timeframe."""

    timeframe: Timeframe
    period: int
    trend: Trend
    is_turning: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "timeframe", parse_timeframe(self.timeframe))
        object.__setattr__(self, "trend", parse_trend(self.trend))
        if int(self.period) <= 0:
            raise InvalidPrecondition(f"EMA period must be positive, got {self.period}")


@dataclass(frozen=True)
class KSTReading:
    """KST momentum state on one chart timeframe."""

    timeframe: Timeframe
    periods: tuple[int, ...]
    cross_state: CrossState = CrossState.NONE

    def __post_init__(self) -> None:
        object.__setattr__(self, "timeframe", parse_timeframe(self.timeframe))
        object.__setattr__(self, "cross_state", parse_cross_state(self.cross_state))
        periods = tuple(int(p) for p in self.periods)
        if len(periods) != KST_PERIOD_COUNT:
            raise InvalidPrecondition(
                f"KST needs {KST_PERIOD_COUNT} periods, got {len(periods)}"
            )
        if any(p <= 0 for p in periods):
            raise InvalidPrecondition(f"KST periods must be positive, got {periods}")
        object.__setattr__(self, "periods", periods)


def _check_one_per_timeframe(readings: Sequence, kind: str) -> None:
    seen = [r.timeframe for r in readings]
    if len(seen) != len(Timeframe) or set(seen) != set(Timeframe):
        raise InvalidPrecondition(
            f"{kind} needs exactly one reading per timeframe "
            f"({', '.join(tf.value for tf in Timeframe)}), got "
            f"[{', '.join(tf.value for tf in seen)}]"
        )


@dataclass(frozen=True)
class TradeAnalysis:
    """A fully specified leveraged trade setup."""

    coin_type: str
    open_dir: Direction
    leverage: int
    open_price: float
    liquid_price: float
    stop_loss: float
    stop_loss_rate: float  # % distance entry -> stop
    lever_stop_loss_risk: float  # stop_loss_rate x leverage

    long_trend: Trend
    mid_trend: Trend
    short_trend: Trend
    short_trend_line_break_times: int

    rsi_level: RsiLevel
    rsi_duration: int
    rsi_unit: str

    price_patterns: tuple[PricePattern, ...] = field(default_factory=tuple)
    ema_list: tuple[EMAReading, ...] = field(default_factory=tuple)
    kst_list: tuple[KSTReading, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "open_dir", parse_direction(self.open_dir))
        object.__setattr__(self, "long_trend", parse_trend(self.long_trend))
        object.__setattr__(self, "mid_trend", parse_trend(self.mid_trend))
        object.__setattr__(self, "short_trend", parse_trend(self.short_trend))
        object.__setattr__(self, "rsi_level", parse_rsi_level(self.rsi_level))
        object.__setattr__(self, "price_patterns", tuple(self.price_patterns))
        object.__setattr__(self, "ema_list", tuple(self.ema_list))
        object.__setattr__(self, "kst_list", tuple(self.kst_list))

        if self.leverage < 1:
            raise InvalidPrecondition(f"Leverage must be >= 1, got {self.leverage}")
        for name in ("open_price", "liquid_price", "stop_loss"):
            if getattr(self, name) <= 0:
                raise InvalidPrecondition(f"{name} must be positive, got {getattr(self, name)}")
        if self.stop_loss_rate < 0 or self.lever_stop_loss_risk < 0:
            raise InvalidPrecondition("Stop-loss rate and leveraged risk must be >= 0")
        if self.short_trend_line_break_times < 0:
            raise InvalidPrecondition(
                f"Trendline break count must be >= 0, got {self.short_trend_line_break_times}"
            )
        if self.rsi_duration <= 0:
            raise InvalidPrecondition(f"RSI duration must be positive, got {self.rsi_duration}")

        sentinels = [p for p in self.price_patterns if p.is_sentinel]
        if sentinels and len(self.price_patterns) > 1:
            raise InvalidPrecondition("Pattern NONE cannot be combined with other patterns")

        _check_one_per_timeframe(self.ema_list, "EMA")
        _check_one_per_timeframe(self.kst_list, "KST")

    @classmethod
    def build(
        cls,
        coin_type: str,
        open_dir: Union[Direction, str],
        leverage: int,
        open_price: float,
        liquid_price: float,
        stop_loss: float,
        long_trend: Union[Trend, str],
        mid_trend: Union[Trend, str],
        short_trend: Union[Trend, str],
        rsi_level: Union[RsiLevel, str],
        rsi_duration: int,
        ema_list: Iterable[EMAReading],
        kst_list: Iterable[KSTReading],
        price_patterns: Optional[Iterable[PricePattern]] = None,
        short_trend_line_break_times: int = 0,
        rsi_unit: str = "hours",
    ) -> "TradeAnalysis":
        """Build a record, deriving the stop-loss rates and normalizing patterns."""
        direction = parse_direction(open_dir)
        if open_price <= 0:
            raise InvalidPrecondition(f"open_price must be positive, got {open_price}")
        rate = compute_stop_loss_rate(direction, open_price, stop_loss, coin=coin_type)
        return cls(
            coin_type=coin_type,
            open_dir=direction,
            leverage=leverage,
            open_price=open_price,
            liquid_price=liquid_price,
            stop_loss=stop_loss,
            stop_loss_rate=rate,
            lever_stop_loss_risk=rate * leverage,
            long_trend=long_trend,
            mid_trend=mid_trend,
            short_trend=short_trend,
            short_trend_line_break_times=short_trend_line_break_times,
            rsi_level=rsi_level,
            rsi_duration=rsi_duration,
            rsi_unit=rsi_unit,
            price_patterns=normalize_patterns(price_patterns or ()),
            ema_list=tuple(ema_list),
            kst_list=tuple(kst_list),
        )

    @property
    def has_patterns(self) -> bool:
        return any(not p.is_sentinel for p in self.price_patterns)

    @property
    def trends(self) -> tuple[Trend, Trend, Trend]:
        """(long, mid, short) Dow trends."""
        return (self.long_trend, self.mid_trend, self.short_trend)

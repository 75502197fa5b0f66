"""Shared test fixtures for trade setup checker tests."""

from __future__ import annotations

from typing import Optional, Sequence

import pytest

from tradecheck.data.trade_analysis import (
    EMAReading,
    KSTReading,
    PricePattern,
    TradeAnalysis,
)

TIMEFRAMES = ("4h", "day", "week")
KST_PERIODS = (10, 15, 20, 30)


def make_ema_list(trends: Sequence[str] = ("up", "up", "up")) -> list[EMAReading]:
    periods = (20, 50, 200)
    return [
        EMAReading(timeframe=tf, period=p, trend=t)
        for tf, p, t in zip(TIMEFRAMES, periods, trends)
    ]


def make_kst_list(
    crosses: Sequence[str] = ("cross_up", "cross_up", "cross_up"),
) -> list[KSTReading]:
    return [
        KSTReading(timeframe=tf, periods=KST_PERIODS, cross_state=c)
        for tf, c in zip(TIMEFRAMES, crosses)
    ]


def make_analysis(
    direction: str = "long",
    long_trend: str = "up",
    mid_trend: str = "up",
    short_trend: str = "up",
    break_times: int = 0,
    stop_loss_rate: float = 5.0,
    leverage: int = 5,
    lever_risk: Optional[float] = None,
    rsi_level: str = "normal",
    patterns: Sequence[PricePattern] = (),
    ema_trends: Sequence[str] = ("up", "up", "up"),
    kst_crosses: Sequence[str] = ("cross_up", "cross_up", "cross_up"),
) -> TradeAnalysis:
    """Create a setup with explicit rates, defaulting to a fully aligned long."""
    open_price = 100.0
    if direction == "long":
        stop = open_price * (1 - stop_loss_rate / 100)
    else:
        stop = open_price * (1 + stop_loss_rate / 100)
    return TradeAnalysis(
        coin_type="SOL/USDT",
        open_dir=direction,
        leverage=leverage,
        open_price=open_price,
        liquid_price=80.0,
        stop_loss=max(stop, 0.01),
        stop_loss_rate=stop_loss_rate,
        lever_stop_loss_risk=stop_loss_rate * leverage if lever_risk is None else lever_risk,
        long_trend=long_trend,
        mid_trend=mid_trend,
        short_trend=short_trend,
        short_trend_line_break_times=break_times,
        rsi_level=rsi_level,
        rsi_duration=3,
        rsi_unit="hours",
        price_patterns=tuple(patterns),
        ema_list=make_ema_list(ema_trends),
        kst_list=make_kst_list(kst_crosses),
    )


@pytest.fixture
def aligned_long() -> TradeAnalysis:
    """Every signal agrees with a 5x long, 5% stop."""
    return make_analysis()


@pytest.fixture
def setup_json() -> dict:
    """A setup in the loader's JSON layout."""
    return {
        "coin": "BTC/USDT",
        "direction": "short",
        "leverage": 10,
        "open_price": 60000.0,
        "liquid_price": 65500.0,
        "stop_loss": 61800.0,
        "trends": {"long": "down", "mid": "down", "short": "sideways"},
        "trendline_breaks": 1,
        "rsi": {"level": "oversold", "duration": 2, "unit": "days"},
        "patterns": [
            {"name": "double_top", "span": "medium"},
            {"name": "triangle_diverging", "span": "short", "breakout": "up"},
        ],
        "ema": [
            {"timeframe": "4h", "period": 20, "trend": "down", "turning": True},
            {"timeframe": "day", "period": 50, "trend": "down"},
            {"timeframe": "week", "period": 200, "trend": "up"},
        ],
        "kst": [
            {"timeframe": "4h", "periods": "10,15,20,30", "cross": "cross_down"},
            {"timeframe": "day", "periods": [10, 15, 20, 30], "cross": "none"},
            {"timeframe": "week", "periods": [10, 15, 20, 30], "cross": "cross_up"},
        ],
    }

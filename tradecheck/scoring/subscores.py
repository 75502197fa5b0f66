"""
Sub-score calculators.

Five independent pure functions, each reading one slice of a trade setup:

1. EMA agreement across the 4H / daily / weekly timeframes (0-100)
2. KST cross agreement across the same timeframes (0-100)
3. Base stop-loss distance sanity (0 / 5 / 10)
4. Leveraged stop-loss risk (0 / 5 / 10, plus a high-risk flag)
5. Open direction vs Dow trend alignment, minus a trendline-break penalty (0-20)
"""

from __future__ import annotations

from collections import Counter
from typing import Hashable, Iterable, Sequence

from tradecheck.data.trade_analysis import EMAReading, KSTReading, TradeAnalysis
from tradecheck.utils.normalize import aligned_trend

# Base stop-loss bands (% of entry price)
STOP_LOSS_IDEAL = (3.0, 8.0)
STOP_LOSS_MIN = 1.0
STOP_LOSS_MAX = 10.0

# Leveraged risk bands (% of margin lost if the stop is hit)
LEVER_RISK_SAFE = 40.0
LEVER_RISK_HIGH = 60.0

# Trend matches (0-3) -> points
DIRECTION_MATCH_POINTS = {0: 0, 1: 5, 2: 15, 3: 20}

# Short trendline break count -> penalty. Counts of 4 and 6 carry no penalty.
BREAK_PENALTIES = {3: 3, 5: 8}
BREAK_PENALTY_SEVERE_AT = 7
BREAK_PENALTY_SEVERE = 15


def _agreement_score(values: Sequence[Hashable]) -> int:
    """Share of readings in the largest same-value group, as floor(0-100)."""
    if not values:
        return 0
    largest = max(Counter(values).values())
    return (largest * 100) // len(values)


def score_ema_consistency(ema_list: Iterable[EMAReading]) -> int:
    return _agreement_score([ema.trend for ema in ema_list])


def score_kst_consistency(kst_list: Iterable[KSTReading]) -> int:
    return _agreement_score([kst.cross_state for kst in kst_list])


def score_base_stop_loss(stop_loss_rate: float) -> int:
    """Score the stop distance before leverage; 3%-8% inclusive is ideal."""
    low, high = STOP_LOSS_IDEAL
    if low <= stop_loss_rate <= high:
        return 10
    if STOP_LOSS_MIN <= stop_loss_rate < low or high < stop_loss_rate <= STOP_LOSS_MAX:
        return 5
    return 0


def score_lever_stop_loss(lever_stop_loss_risk: float) -> tuple[int, bool]:
    """Score the leveraged loss at the stop.

    Returns:
        (score, high_risk) where high_risk is set only above 60%.
    """
    if lever_stop_loss_risk <= LEVER_RISK_SAFE:
        return 10, False
    if lever_stop_loss_risk <= LEVER_RISK_HIGH:
        return 5, False
    return 0, True


def break_penalty(break_times: int) -> int:
    if break_times >= BREAK_PENALTY_SEVERE_AT:
        return BREAK_PENALTY_SEVERE
    return BREAK_PENALTIES.get(break_times, 0)


def direction_match_count(record: TradeAnalysis) -> int:
    """How many of the long/mid/short trends point the way the trade does."""
    wanted = aligned_trend(record.open_dir)
    return sum(1 for trend in record.trends if trend == wanted)


def score_direction_trend_match(record: TradeAnalysis) -> int:
    base = DIRECTION_MATCH_POINTS[direction_match_count(record)]
    return max(base - break_penalty(record.short_trend_line_break_times), 0)

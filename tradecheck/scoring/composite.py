"""
Composite consistency scorer.

total = 0.3 x EMA + 0.3 x KST + base SL + lever SL + direction match

EMA and KST are 0-100 agreement ratios weighted down to 30 points each,
while the other three terms are already absolute points (10 + 10 + 20), so
the ceiling is exactly 100.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from tradecheck.data.trade_analysis import TradeAnalysis
from tradecheck.scoring.subscores import (
    score_base_stop_loss,
    score_direction_trend_match,
    score_ema_consistency,
    score_kst_consistency,
    score_lever_stop_loss,
)

logger = logging.getLogger(__name__)

EMA_WEIGHT = 0.3
KST_WEIGHT = 0.3

HIGH_CONSISTENCY_THRESHOLD = 80
ACCEPTABLE_THRESHOLD = 60


class ConsistencyBand(Enum):
    HIGH = "high"  # signals agree, risk controlled
    ACCEPTABLE = "acceptable"
    WEAK = "weak"  # confused signals or poor risk control, stand aside

    @property
    def verdict(self) -> str:
        return BAND_VERDICTS[self]


BAND_VERDICTS = {
    ConsistencyBand.HIGH: (
        "High consistency: signals agree, risk control is sound, "
        "the entry has strong technical support"
    ),
    ConsistencyBand.ACCEPTABLE: (
        "Acceptable: signals broadly agree, risk control is passable, "
        "the entry has some technical support"
    ),
    ConsistencyBand.WEAK: (
        "Weak: signals are mixed or risk control is unsound, "
        "consider staying out"
    ),
}


def band_for(total: int) -> ConsistencyBand:
    if total >= HIGH_CONSISTENCY_THRESHOLD:
        return ConsistencyBand.HIGH
    if total >= ACCEPTABLE_THRESHOLD:
        return ConsistencyBand.ACCEPTABLE
    return ConsistencyBand.WEAK


@dataclass(frozen=True)
class ConsistencyBreakdown:
    """All sub-scores behind one composite score."""

    ema_score: int
    kst_score: int
    base_stop_loss_score: int
    lever_stop_loss_score: int
    high_risk: bool
    direction_match_score: int
    total: int

    @property
    def band(self) -> ConsistencyBand:
        return band_for(self.total)


def evaluate(record: TradeAnalysis) -> ConsistencyBreakdown:
    ema = score_ema_consistency(record.ema_list)
    kst = score_kst_consistency(record.kst_list)
    base_sl = score_base_stop_loss(record.stop_loss_rate)
    lever_sl, high_risk = score_lever_stop_loss(record.lever_stop_loss_risk)
    direction = score_direction_trend_match(record)

    total = round(EMA_WEIGHT * ema + KST_WEIGHT * kst + base_sl + lever_sl + direction)

    logger.debug(
        "%s %s: ema=%d kst=%d base_sl=%d lever_sl=%d dir=%d -> %d",
        record.coin_type, record.open_dir.value,
        ema, kst, base_sl, lever_sl, direction, total,
    )
    return ConsistencyBreakdown(
        ema_score=ema,
        kst_score=kst,
        base_stop_loss_score=base_sl,
        lever_stop_loss_score=lever_sl,
        high_risk=high_risk,
        direction_match_score=direction,
        total=total,
    )


def score_total(record: TradeAnalysis) -> int:
    return evaluate(record).total

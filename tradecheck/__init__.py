"""
Trade Setup Consistency Checker

Scores how well a discretionary leveraged trade setup hangs together
(multi-timeframe trends, RSI, chart patterns, EMA/KST readings and stop
placement) on a 0-100 scale, and lists the contradictions between inputs.
"""

from tradecheck.analysis.contradictions import find_contradictions
from tradecheck.data.signals import InvalidPrecondition
from tradecheck.data.trade_analysis import (
    EMAReading,
    KSTReading,
    PricePattern,
    TradeAnalysis,
)
from tradecheck.scoring.composite import (
    ACCEPTABLE_THRESHOLD,
    HIGH_CONSISTENCY_THRESHOLD,
    evaluate,
    score_total,
)
from tradecheck.scoring.subscores import (
    score_base_stop_loss,
    score_direction_trend_match,
    score_ema_consistency,
    score_kst_consistency,
    score_lever_stop_loss,
)

__version__ = "0.1.0"

__all__ = [
    "ACCEPTABLE_THRESHOLD",
    "EMAReading",
    "HIGH_CONSISTENCY_THRESHOLD",
    "InvalidPrecondition",
    "KSTReading",
    "PricePattern",
    "TradeAnalysis",
    "evaluate",
    "find_contradictions",
    "score_base_stop_loss",
    "score_direction_trend_match",
    "score_ema_consistency",
    "score_kst_consistency",
    "score_lever_stop_loss",
    "score_total",
]

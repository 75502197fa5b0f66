"""
Contradiction analyzer.

Cross-checks a trade setup for inputs that argue against each other. Rules
are independent and cumulative, and findings come out in a fixed order:

1. Trend vs RSI
2. Short trendline breaks
3. Chart patterns vs trend / direction (in pattern list order)
4. EMA / KST agreement
5. Base stop-loss distance
6. Leveraged stop-loss risk
7. Direction vs trend alignment
"""

from __future__ import annotations

import logging
from typing import Optional

from tradecheck.data.signals import (
    PATTERN_LABELS,
    SPAN_LABELS,
    BreakoutDir,
    Direction,
    PatternName,
    PatternSpan,
    RsiLevel,
    Trend,
)
from tradecheck.data.trade_analysis import PricePattern, TradeAnalysis
from tradecheck.scoring.subscores import (
    LEVER_RISK_HIGH,
    LEVER_RISK_SAFE,
    STOP_LOSS_MAX,
    STOP_LOSS_MIN,
    score_direction_trend_match,
    score_ema_consistency,
    score_kst_consistency,
    score_lever_stop_loss,
)
from tradecheck.utils.normalize import is_bearish, is_bullish, trend_for_span

logger = logging.getLogger(__name__)

MIN_INDICATOR_CONSISTENCY = 60
BREAKS_WEAKENED_AT = 2
BREAKS_INVALIDATED_AT = 3

UPTREND_OVERBOUGHT = (
    "Long/mid-term trend is up but RSI is overbought: trend continuation is doubtful"
)
DOWNTREND_OVERSOLD = (
    "Long/mid-term trend is down but RSI is oversold: trend continuation is doubtful"
)
TRENDLINE_WEAKENED = (
    "Short-term trendline broken 2+ times: trend validity weakened, "
    "entry logic less consistent"
)
TRENDLINE_INVALIDATED = (
    "[HIGH RISK] Short-term trendline broken 3+ times: trend invalidated, "
    "entry logic lacks support"
)
EMA_INCONSISTENT = (
    "EMA signals disagree across timeframes (consistency < 60): trend reading is confused"
)
KST_INCONSISTENT = (
    "KST crosses disagree across timeframes (consistency < 60): momentum signals are confused"
)
STOP_TOO_WIDE = "Base stop-loss above 10%: stop too wide, risky even without leverage"
STOP_TOO_TIGHT = "Base stop-loss below 1%: stop too tight, noise risk of being stopped out"
LEVER_RISK_EXTREME = (
    "[HIGH RISK] Leveraged stop-loss risk above 60%: hitting the stop loses "
    "more than 60% of margin"
)
LEVER_RISK_ELEVATED = "Leveraged stop-loss risk between 40% and 60%: enter with caution"
NO_DIRECTION_SUPPORT = (
    "Direction/trend alignment score is 0: no technical support for direction"
)

_SPAN_TREND_NAMES = {
    PatternSpan.SHORT: "short-term",
    PatternSpan.MEDIUM: "mid-term",
    PatternSpan.LONG: "long-term",
}


def _pattern_prefix(pattern: PricePattern) -> str:
    return f"{SPAN_LABELS[pattern.timeframe_span]} {PATTERN_LABELS[pattern.name]}"


def _trend_rsi_findings(record: TradeAnalysis) -> list[str]:
    findings = []
    higher = (record.long_trend, record.mid_trend)
    if Trend.UP in higher and record.rsi_level == RsiLevel.OVERBOUGHT:
        findings.append(UPTREND_OVERBOUGHT)
    if Trend.DOWN in higher and record.rsi_level == RsiLevel.OVERSOLD:
        findings.append(DOWNTREND_OVERSOLD)
    return findings


def _trendline_findings(record: TradeAnalysis) -> list[str]:
    findings = []
    if record.short_trend_line_break_times >= BREAKS_WEAKENED_AT:
        findings.append(TRENDLINE_WEAKENED)
    if record.short_trend_line_break_times >= BREAKS_INVALIDATED_AT:
        findings.append(TRENDLINE_INVALIDATED)
    return findings


def _pattern_findings(record: TradeAnalysis, pattern: PricePattern) -> list[str]:
    findings = []
    prefix = _pattern_prefix(pattern)
    span_trend = trend_for_span(record, pattern.timeframe_span)
    trend_name = _SPAN_TREND_NAMES[pattern.timeframe_span]

    if is_bullish(pattern.name) and span_trend == Trend.DOWN:
        findings.append(
            f"{prefix} (bullish pattern) conflicts with the {trend_name} downtrend"
        )
    if is_bearish(pattern.name) and span_trend == Trend.UP:
        findings.append(
            f"{prefix} (bearish pattern) conflicts with the {trend_name} uptrend"
        )

    if pattern.name == PatternName.TRIANGLE_CONVERGING:
        if record.long_trend == Trend.SIDEWAYS:
            findings.append(
                f"{prefix} needs defined trend to continue; "
                f"the long-term trend is sideways"
            )
        if record.short_trend == Trend.UP and pattern.breakout_dir == BreakoutDir.DOWN:
            findings.append(
                f"{prefix} broke the lower boundary against the short-term uptrend"
            )
        if record.short_trend == Trend.DOWN and pattern.breakout_dir == BreakoutDir.UP:
            findings.append(
                f"{prefix} broke the upper boundary against the short-term downtrend"
            )

    if pattern.name == PatternName.TRIANGLE_DIVERGING:
        if record.long_trend != Trend.SIDEWAYS and pattern.breakout_dir == BreakoutDir.NONE:
            findings.append(
                f"{prefix} signals a reversal but has not broken out: "
                f"signal invalid, no breakout yet"
            )
        if pattern.breakout_dir == BreakoutDir.UP and record.open_dir == Direction.SHORT:
            findings.append(f"{prefix} broke upward, conflicting with the short entry")
        if pattern.breakout_dir == BreakoutDir.DOWN and record.open_dir == Direction.LONG:
            findings.append(f"{prefix} broke downward, conflicting with the long entry")

    return findings


def find_contradictions(
    record: TradeAnalysis, high_risk: Optional[bool] = None
) -> list[str]:
    """List the contradictions in a trade setup, in rule order.

    Args:
        record: The setup to check.
        high_risk: Flag from ``score_lever_stop_loss``. Rule 6 always reads
            the record's leveraged risk; a flag that disagrees with it is
            logged and otherwise ignored.
    """
    if high_risk is not None:
        _, derived = score_lever_stop_loss(record.lever_stop_loss_risk)
        if high_risk != derived:
            logger.warning(
                "%s: high_risk=%s disagrees with leveraged risk %.2f%%",
                record.coin_type, high_risk, record.lever_stop_loss_risk,
            )

    findings: list[str] = []
    findings.extend(_trend_rsi_findings(record))
    findings.extend(_trendline_findings(record))

    for pattern in record.price_patterns:
        if pattern.is_sentinel:
            continue
        findings.extend(_pattern_findings(record, pattern))

    if score_ema_consistency(record.ema_list) < MIN_INDICATOR_CONSISTENCY:
        findings.append(EMA_INCONSISTENT)
    if score_kst_consistency(record.kst_list) < MIN_INDICATOR_CONSISTENCY:
        findings.append(KST_INCONSISTENT)

    if record.stop_loss_rate > STOP_LOSS_MAX:
        findings.append(STOP_TOO_WIDE)
    if record.stop_loss_rate < STOP_LOSS_MIN:
        findings.append(STOP_TOO_TIGHT)

    if record.lever_stop_loss_risk > LEVER_RISK_HIGH:
        findings.append(LEVER_RISK_EXTREME)
    elif record.lever_stop_loss_risk > LEVER_RISK_SAFE:
        findings.append(LEVER_RISK_ELEVATED)

    if score_direction_trend_match(record) == 0:
        findings.append(NO_DIRECTION_SUPPORT)

    if findings:
        logger.debug("%s: %d contradiction(s)", record.coin_type, len(findings))
    return findings

"""
Plain-text report for one evaluated trade setup.
"""

from __future__ import annotations

from typing import Optional, Sequence

from tradecheck.config import ReportConfig
from tradecheck.data.signals import (
    BREAKOUT_LABELS,
    PATTERN_LABELS,
    SPAN_LABELS,
    TIMEFRAME_LABELS,
)
from tradecheck.data.trade_analysis import TradeAnalysis
from tradecheck.scoring.composite import ConsistencyBreakdown
from tradecheck.utils.normalize import is_triangle

RED = "\033[31m"
RESET = "\033[0m"
RULE = "=" * 46


def _patterns_line(record: TradeAnalysis) -> str:
    if not record.has_patterns:
        return "None"
    parts = []
    for pattern in record.price_patterns:
        text = f"{SPAN_LABELS[pattern.timeframe_span]} {PATTERN_LABELS[pattern.name]}"
        if is_triangle(pattern.name):
            text += f" ({BREAKOUT_LABELS[pattern.breakout_dir]})"
        parts.append(text)
    return ", ".join(parts)


def render_report(
    record: TradeAnalysis,
    breakdown: ConsistencyBreakdown,
    contradictions: Sequence[str],
    config: Optional[ReportConfig] = None,
) -> str:
    """Render the full analysis report."""
    cfg = config or ReportConfig()
    px = cfg.price_precision
    pct = cfg.rate_precision

    lines = [
        RULE,
        "        TRADE SETUP CONSISTENCY REPORT",
        RULE,
        "",
        "[1. Entry parameters]",
        f"Coin: {record.coin_type}",
        f"Direction: {record.open_dir.value.upper()}",
        f"Leverage: {record.leverage}x",
        f"Entry price: {record.open_price:.{px}f}",
        f"Liquidation price: {record.liquid_price:.{px}f}",
        f"Stop-loss price: {record.stop_loss:.{px}f}",
        f"Base stop-loss rate: {record.stop_loss_rate:.{pct}f}%",
        f"Leveraged stop-loss risk: {record.lever_stop_loss_risk:.{pct}f}%",
        "",
        "[2. Technical picture]",
        f"Dow trends: long={record.long_trend.value}, mid={record.mid_trend.value}, "
        f"short={record.short_trend.value}",
        f"Short-term trendline breaks: {record.short_trend_line_break_times} "
        f"(more breaks, weaker trend)",
        f"RSI: {record.rsi_level.value} (for {record.rsi_duration} {record.rsi_unit})",
        f"Price patterns: {_patterns_line(record)}",
        "",
        "[3. Multi-timeframe EMA]",
    ]
    for ema in record.ema_list:
        lines.append(
            f"{TIMEFRAME_LABELS[ema.timeframe]} EMA{ema.period}: trend={ema.trend.value}, "
            f"turning={'yes' if ema.is_turning else 'no'}"
        )
    lines.append(f"EMA consistency: {breakdown.ema_score}/100")

    lines += ["", "[4. Multi-timeframe KST]"]
    for kst in record.kst_list:
        periods = ",".join(str(p) for p in kst.periods)
        lines.append(
            f"{TIMEFRAME_LABELS[kst.timeframe]} KST ({periods}): {kst.cross_state.value}"
        )
    lines.append(f"KST consistency: {breakdown.kst_score}/100")

    lines += [
        "",
        "[5. Risk control]",
        f"Base stop-loss score: {breakdown.base_stop_loss_score}/10 (ideal 3%-8%)",
        f"Leveraged risk score: {breakdown.lever_stop_loss_score}/10 "
        f"(<=40% full, 40%-60% half, >60% zero)",
    ]
    if breakdown.high_risk:
        alert = (
            "[URGENT] Leveraged stop-loss risk above 60%: a stop-out means a heavy "
            "loss, adjust leverage or stop price now"
        )
        lines.append(f"{RED}{alert}{RESET}" if cfg.color else alert)
    lines.append(
        f"Direction/trend alignment: {breakdown.direction_match_score}/20 "
        f"(trendline break penalty applied)"
    )

    lines += [
        "",
        "[6. Overall consistency]",
        f"Total score: {breakdown.total}/100",
        f"Verdict: {breakdown.band.verdict}",
        "",
        "[7. Contradictions]",
    ]
    if not contradictions:
        lines.append("No notable contradictions detected.")
    else:
        lines += [f"{i}. {text}" for i, text in enumerate(contradictions, 1)]

    lines += ["", RULE]
    return "\n".join(lines) + "\n"

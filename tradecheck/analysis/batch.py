"""
Batch evaluation of many trade setups into a DataFrame.
"""

from __future__ import annotations

import logging
from typing import Iterable

import pandas as pd

from tradecheck.analysis.contradictions import find_contradictions
from tradecheck.data.trade_analysis import TradeAnalysis
from tradecheck.scoring.composite import ConsistencyBand, evaluate

logger = logging.getLogger(__name__)

BATCH_COLUMNS = [
    "coin",
    "direction",
    "leverage",
    "stop_loss_rate",
    "lever_stop_loss_risk",
    "ema_score",
    "kst_score",
    "base_sl_score",
    "lever_sl_score",
    "high_risk",
    "direction_score",
    "total",
    "band",
    "contradiction_count",
    "contradictions",
]


def evaluate_batch(records: Iterable[TradeAnalysis]) -> pd.DataFrame:
    """Score each setup independently; one row per setup, input order kept."""
    rows = []
    for record in records:
        breakdown = evaluate(record)
        findings = find_contradictions(record, breakdown.high_risk)
        rows.append({
            "coin": record.coin_type,
            "direction": record.open_dir.value,
            "leverage": record.leverage,
            "stop_loss_rate": round(record.stop_loss_rate, 4),
            "lever_stop_loss_risk": round(record.lever_stop_loss_risk, 4),
            "ema_score": breakdown.ema_score,
            "kst_score": breakdown.kst_score,
            "base_sl_score": breakdown.base_stop_loss_score,
            "lever_sl_score": breakdown.lever_stop_loss_score,
            "high_risk": breakdown.high_risk,
            "direction_score": breakdown.direction_match_score,
            "total": breakdown.total,
            "band": breakdown.band.value,
            "contradiction_count": len(findings),
            "contradictions": " | ".join(findings),
        })

    logger.info("Evaluated %d setups", len(rows))
    return pd.DataFrame(rows, columns=BATCH_COLUMNS)


def summarize_batch(frame: pd.DataFrame) -> dict:
    """Aggregate statistics over an ``evaluate_batch`` frame."""
    band_counts = {band.value: 0 for band in ConsistencyBand}
    if frame.empty:
        return {
            "count": 0,
            "mean_total": 0.0,
            "min_total": 0,
            "max_total": 0,
            "high_risk_count": 0,
            "bands": band_counts,
        }

    band_counts.update(frame["band"].value_counts().to_dict())
    return {
        "count": int(len(frame)),
        "mean_total": round(float(frame["total"].mean()), 2),
        "min_total": int(frame["total"].min()),
        "max_total": int(frame["total"].max()),
        "high_risk_count": int(frame["high_risk"].sum()),
        "bands": {k: int(v) for k, v in band_counts.items()},
    }

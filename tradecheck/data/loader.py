"""
Trade setup loader.

Reads setups from JSON files, the boundary where raw user input becomes a
validated ``TradeAnalysis``. Expected layout::

    {
      "coin": "SOL/USDT",
      "direction": "long",
      "leverage": 5,
      "open_price": 150.0,
      "liquid_price": 122.0,
      "stop_loss": 142.5,
      "trends": {"long": "up", "mid": "up", "short": "up"},
      "trendline_breaks": 0,
      "rsi": {"level": "normal", "duration": 3, "unit": "hours"},
      "patterns": [{"name": "triangle_diverging", "span": "short", "breakout": "up"}],
      "ema": [{"timeframe": "4h", "period": 20, "trend": "up", "turning": false}, ...],
      "kst": [{"timeframe": "4h", "periods": "10,15,20,30", "cross": "cross_up"}, ...]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

from tradecheck.data.signals import InvalidPrecondition
from tradecheck.data.trade_analysis import (
    EMAReading,
    KSTReading,
    PricePattern,
    TradeAnalysis,
)

logger = logging.getLogger(__name__)


def _parse_periods(raw: Union[str, list]) -> tuple[int, ...]:
    """KST periods as a list or the comma-separated form, e.g. '10,15,20,30'."""
    if isinstance(raw, str):
        parts = [p for p in raw.replace("，", ",").split(",") if p.strip()]
    else:
        parts = list(raw)
    try:
        return tuple(int(p) for p in parts)
    except (TypeError, ValueError) as e:
        raise InvalidPrecondition(f"KST periods must be integers, got {raw!r}") from e


def _parse_turning(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("true", "yes", "y", "1", "是")
    return bool(raw)


def analysis_from_dict(data: dict) -> TradeAnalysis:
    """Build a ``TradeAnalysis`` from the JSON layout above."""
    try:
        trends = data["trends"]
        rsi = data["rsi"]
        patterns = [
            PricePattern(
                name=p["name"],
                timeframe_span=p.get("span", "short"),
                breakout_dir=p.get("breakout"),
            )
            for p in data.get("patterns", [])
        ]
        ema_list = [
            EMAReading(
                timeframe=e["timeframe"],
                period=int(e["period"]),
                trend=e["trend"],
                is_turning=_parse_turning(e.get("turning", False)),
            )
            for e in data["ema"]
        ]
        kst_list = [
            KSTReading(
                timeframe=k["timeframe"],
                periods=_parse_periods(k["periods"]),
                cross_state=k.get("cross", "none"),
            )
            for k in data["kst"]
        ]
        return TradeAnalysis.build(
            coin_type=str(data["coin"]),
            open_dir=data["direction"],
            leverage=int(data["leverage"]),
            open_price=float(data["open_price"]),
            liquid_price=float(data["liquid_price"]),
            stop_loss=float(data["stop_loss"]),
            long_trend=trends["long"],
            mid_trend=trends["mid"],
            short_trend=trends["short"],
            short_trend_line_break_times=int(data.get("trendline_breaks", 0)),
            rsi_level=rsi["level"],
            rsi_duration=int(rsi["duration"]),
            rsi_unit=str(rsi.get("unit", "hours")),
            price_patterns=patterns,
            ema_list=ema_list,
            kst_list=kst_list,
        )
    except KeyError as e:
        raise InvalidPrecondition(f"Missing field: {e.args[0]}") from e
    except (TypeError, AttributeError) as e:
        # wrong JSON shape, e.g. a null number or a string where an object belongs
        raise InvalidPrecondition(f"Malformed setup: {e}") from e


def load_analysis(path: Path) -> TradeAnalysis:
    """Load a single setup from a JSON file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")

    analysis = analysis_from_dict(data)
    logger.info(
        "Loaded %s %s x%d from %s",
        analysis.coin_type, analysis.open_dir.value, analysis.leverage, path.name,
    )
    return analysis


def load_analyses_from_directory(directory: Path) -> list[tuple[Path, TradeAnalysis]]:
    """Load every ``*.json`` setup in a directory, skipping invalid files."""
    directory = Path(directory)
    json_files = sorted(directory.glob("*.json"))
    if not json_files:
        logger.warning("No JSON files found in %s", directory)
        return []

    analyses = []
    for json_file in json_files:
        try:
            analyses.append((json_file, load_analysis(json_file)))
        except (OSError, ValueError) as e:
            logger.warning("Failed to load %s: %s", json_file.name, e)
            continue

    logger.info("Loaded %d setups from %s", len(analyses), directory)
    return analyses

"""
Support and resistance levels from a run of candles.

Three independent readings:
1. Range extremes - highest high / lowest low of the window
2. Classic pivot point of the latest candle with S1-S3 / R1-R3
3. Dense trading zone - mean close +/- one standard deviation
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

import numpy as np
import pandas as pd

from tradecheck.data.signals import InvalidPrecondition

logger = logging.getLogger(__name__)

OHLC_COLUMNS = ["open", "high", "low", "close"]


class ChartTimeframe(Enum):
    DAILY = "daily"
    FOUR_HOUR = "4h"


@dataclass(frozen=True)
class Candle:
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


@dataclass(frozen=True)
class SupportResistanceLevels:
    timeframe: ChartTimeframe
    candle_count: int

    highest_high: float
    lowest_low: float

    pivot: float
    s1: float
    s2: float
    s3: float
    r1: float
    r2: float
    r3: float

    mean_close: float
    std_close: float
    dense_support: float
    dense_resistance: float

    def summary_str(self) -> str:
        return (
            f"=== SUPPORT / RESISTANCE ({self.timeframe.value}, {self.candle_count} candles) ===\n"
            f"Range high (resistance): {self.highest_high:.4f}\n"
            f"Range low (support): {self.lowest_low:.4f}\n"
            f"--- Pivot (latest candle) ---\n"
            f"P: {self.pivot:.4f}\n"
            f"S1: {self.s1:.4f} | S2: {self.s2:.4f} | S3: {self.s3:.4f}\n"
            f"R1: {self.r1:.4f} | R2: {self.r2:.4f} | R3: {self.r3:.4f}\n"
            f"--- Dense trading zone ---\n"
            f"Support: {self.dense_support:.4f}\n"
            f"Resistance: {self.dense_resistance:.4f}\n"
        )


def _to_frame(candles: Union[pd.DataFrame, Sequence[Candle]]) -> pd.DataFrame:
    if isinstance(candles, pd.DataFrame):
        missing = [c for c in OHLC_COLUMNS if c not in candles.columns]
        if missing:
            raise InvalidPrecondition(f"Candle frame missing columns: {missing}")
        return candles[OHLC_COLUMNS].astype(float).reset_index(drop=True)
    return pd.DataFrame(
        [[c.open, c.high, c.low, c.close] for c in candles],
        columns=OHLC_COLUMNS,
        dtype=float,
    )


class SupportResistanceCalculator:
    """Computes support/resistance levels for a window of candles.

    Usage:
        calc = SupportResistanceCalculator(candles, ChartTimeframe.DAILY)
        print(calc.levels.summary_str())
    """

    def __init__(
        self,
        candles: Union[pd.DataFrame, Sequence[Candle]],
        timeframe: ChartTimeframe = ChartTimeframe.DAILY,
    ):
        self._frame = _to_frame(candles)
        self._timeframe = timeframe
        self._validate()
        self.levels = self._calculate()

    def _validate(self) -> None:
        if self._frame.empty:
            raise InvalidPrecondition("Candle data cannot be empty")
        if (self._frame["high"] < self._frame["low"]).any():
            raise InvalidPrecondition("Found a candle with high below low")

    def _calculate(self) -> SupportResistanceLevels:
        highs = self._frame["high"].to_numpy()
        lows = self._frame["low"].to_numpy()
        closes = self._frame["close"].to_numpy()

        latest = self._frame.iloc[-1]
        pivot = (latest["high"] + latest["low"] + latest["close"]) / 3.0
        span = latest["high"] - latest["low"]

        mean_close = float(np.mean(closes))
        std_close = float(np.std(closes))  # population std

        levels = SupportResistanceLevels(
            timeframe=self._timeframe,
            candle_count=len(self._frame),
            highest_high=float(np.max(highs)),
            lowest_low=float(np.min(lows)),
            pivot=float(pivot),
            s1=float(2 * pivot - latest["high"]),
            s2=float(pivot - span),
            s3=float(pivot - 2 * span),
            r1=float(2 * pivot - latest["low"]),
            r2=float(pivot + span),
            r3=float(pivot + 2 * span),
            mean_close=mean_close,
            std_close=std_close,
            dense_support=mean_close - std_close,
            dense_resistance=mean_close + std_close,
        )
        logger.debug(
            "S/R %s over %d candles: pivot=%.4f dense=[%.4f, %.4f]",
            self._timeframe.value, levels.candle_count, levels.pivot,
            levels.dense_support, levels.dense_resistance,
        )
        return levels

"""
Configuration management for the trade setup checker.

The consistency score thresholds are part of the score's meaning and live as
constants next to the scorers; only the supplementary calculators and report
formatting are configurable here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class RiskConfig:
    """Perpetual-contract parameters for the margin calculator."""
    maintenance_margin_rate: float = 0.005  # 0.5%, USDT-margined perpetuals
    coin_risk_threshold: float = 1000.0  # leverage x position ratio ceiling
    warning_fraction: float = 0.8  # SAFE up to 80% of the threshold


@dataclass(frozen=True)
class ReportConfig:
    """Number formatting for rendered reports."""
    price_precision: int = 4
    rate_precision: int = 2
    color: bool = False  # ANSI red for the high-risk alert line


@dataclass
class EngineConfig:
    """Top-level configuration."""
    risk: RiskConfig = field(default_factory=RiskConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Load configuration from environment variables."""
        return cls(
            risk=RiskConfig(
                maintenance_margin_rate=float(
                    os.getenv("TRADECHECK_MAINTENANCE_MARGIN_RATE", "0.005")
                ),
                coin_risk_threshold=float(
                    os.getenv("TRADECHECK_COIN_RISK_THRESHOLD", "1000")
                ),
                warning_fraction=float(
                    os.getenv("TRADECHECK_WARNING_FRACTION", "0.8")
                ),
            ),
            report=ReportConfig(
                price_precision=int(os.getenv("TRADECHECK_PRICE_PRECISION", "4")),
                rate_precision=int(os.getenv("TRADECHECK_RATE_PRECISION", "2")),
                color=os.getenv("TRADECHECK_COLOR", "").lower() == "true",
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config

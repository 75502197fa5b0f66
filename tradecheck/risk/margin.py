"""
Leverage, liquidation and margin calculator.

Isolated-margin math for USDT-margined perpetual contracts:

- risk coefficient = leverage x position ratio (% of capital), compared
  against a per-coin threshold
- initial margin = capital x ratio, position value = margin x leverage
- liquidation price where the remaining margin equals the maintenance
  requirement
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from tradecheck.config import RiskConfig
from tradecheck.data.signals import Direction, InvalidPrecondition
from tradecheck.utils.normalize import parse_direction


class Coin(Enum):
    BTC = "BTC"
    ETH = "ETH"
    SOL = "SOL"
    DOGE = "DOGE"


class RiskLevel(Enum):
    NONE = "none"  # no position or no exposure
    SAFE = "safe"  # within 80% of threshold
    WARNING = "warning"  # approaching threshold
    EXCEEDED = "exceeded"  # over threshold, do not trade


def parse_coin(value: Union[Coin, str]) -> Coin:
    """Accept 'BTC', 'btc' or a pair such as 'BTC/USDT'."""
    if isinstance(value, Coin):
        return value
    base = str(value).strip().upper().split("/")[0]
    for coin in Coin:
        if coin.value == base:
            return coin
    raise InvalidPrecondition(f"Unknown coin, no risk threshold: {value!r}")


@dataclass(frozen=True)
class MarginSummary:
    coin: Coin
    direction: Direction
    risk_threshold: float
    risk_coefficient: float
    risk_level: RiskLevel
    initial_margin: float
    maintenance_margin: float
    margin_to_add: float
    liquidation_price: float

    def summary_str(self) -> str:
        return (
            f"=== MARGIN & LIQUIDATION ({self.coin.value} {self.direction.value.upper()}) ===\n"
            f"Risk threshold: {self.risk_threshold:.0f}\n"
            f"Risk coefficient: {self.risk_coefficient:.2f}\n"
            f"Risk level: {self.risk_level.value}\n"
            f"Initial margin: {self.initial_margin:.2f} USDT\n"
            f"Maintenance margin: {self.maintenance_margin:.2f} USDT\n"
            f"Margin to add: {self.margin_to_add:.2f} USDT\n"
            f"Liquidation price: {self.liquidation_price:.4f} USDT\n"
        )


class MarginCalculator:
    """Risk coefficient, margin and liquidation price for one position.

    Usage:
        calc = MarginCalculator("BTC", 10, 20, 60000.0, "long", 10000.0)
        print(calc.summary().summary_str())
    """

    def __init__(
        self,
        coin: Union[Coin, str],
        leverage: float,
        position_ratio: float,
        entry_price: float,
        direction: Union[Direction, str],
        total_capital: float,
        config: Optional[RiskConfig] = None,
    ):
        if leverage < 1:
            raise InvalidPrecondition("Leverage cannot be below 1x")
        if position_ratio < 0 or position_ratio > 100:
            raise InvalidPrecondition("Position ratio must be within 0-100 (%)")
        if entry_price <= 0:
            raise InvalidPrecondition("Entry price must be positive")
        if total_capital <= 0:
            raise InvalidPrecondition("Total capital must be positive")

        self.coin = parse_coin(coin)
        self.direction = parse_direction(direction)
        self.leverage = leverage
        self.position_ratio = position_ratio
        self.entry_price = entry_price
        self.total_capital = total_capital
        self._config = config or RiskConfig()

    @property
    def risk_threshold(self) -> float:
        return self._config.coin_risk_threshold

    @property
    def risk_coefficient(self) -> float:
        return self.leverage * self.position_ratio

    @property
    def risk_level(self) -> RiskLevel:
        coeff = self.risk_coefficient
        if coeff == 0:
            return RiskLevel.NONE
        if coeff <= self.risk_threshold * self._config.warning_fraction:
            return RiskLevel.SAFE
        if coeff <= self.risk_threshold:
            return RiskLevel.WARNING
        return RiskLevel.EXCEEDED

    @property
    def initial_margin(self) -> float:
        return self.total_capital * (self.position_ratio / 100.0)

    @property
    def position_value(self) -> float:
        return self.initial_margin * self.leverage

    @property
    def position_amount(self) -> float:
        return self.position_value / self.entry_price

    @property
    def maintenance_margin(self) -> float:
        return self.position_value * self._config.maintenance_margin_rate

    @property
    def liquidation_price(self) -> float:
        """Isolated-margin liquidation price; the entry itself for an empty position."""
        amount = self.position_amount
        if amount == 0:
            return self.entry_price
        cushion = (self.initial_margin - self.maintenance_margin) / amount
        if self.direction == Direction.LONG:
            return self.entry_price - cushion
        return self.entry_price + cushion

    @property
    def unrealized_loss(self) -> float:
        """Loss carried at the liquidation price."""
        move = self.entry_price - self.liquidation_price
        if self.direction == Direction.SHORT:
            move = -move
        return move * self.position_amount

    @property
    def margin_to_add(self) -> float:
        surplus = self.initial_margin - self.unrealized_loss
        return max(self.maintenance_margin - surplus, 0.0)

    def summary(self) -> MarginSummary:
        return MarginSummary(
            coin=self.coin,
            direction=self.direction,
            risk_threshold=self.risk_threshold,
            risk_coefficient=self.risk_coefficient,
            risk_level=self.risk_level,
            initial_margin=self.initial_margin,
            maintenance_margin=self.maintenance_margin,
            margin_to_add=self.margin_to_add,
            liquidation_price=self.liquidation_price,
        )

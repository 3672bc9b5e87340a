"""
==============================================================================
Gold Price Estimator
==============================================================================

Estimated sale price of a gold item from its weight.

    base_price           = weight * gold_rate * (purity / 24)
    making_charge_amount = base_price * making_charge_percent / 100
    total_price          = base_price + making_charge_amount

Purity is in karats (24 = pure gold). No rounding happens here; display
formatting is up to the caller.

==============================================================================
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

from app.utils.parsing import parse_measure_or_zero


FULL_PURITY_KARATS = 24
DEFAULT_PURITY_KARATS = 22


class PriceEstimate(BaseModel):
    """Price breakdown for one item."""

    model_config = ConfigDict(frozen=True)

    weight: float
    purity: float
    gold_rate: float
    making_charge_percent: float
    base_price: float
    making_charge_amount: float
    total_price: float

    def to_display(self) -> Dict[str, Any]:
        """Breakdown with two-decimal display strings alongside raw values."""
        data = self.model_dump()
        data["display"] = {
            "base_price": f"{self.base_price:.2f}",
            "making_charge_amount": f"{self.making_charge_amount:.2f}",
            "total_price": f"{self.total_price:.2f}",
        }
        return data


def calculate_price(
    weight: Any,
    gold_rate: float,
    making_charge_percent: float,
    purity: float = DEFAULT_PURITY_KARATS
) -> PriceEstimate:
    """
    Estimate the price of an item.

    Args:
        weight: Weight display string such as "10g"; unparseable means 0
        gold_rate: Price of pure gold per weight unit
        making_charge_percent: Surcharge on the base price, in percent
        purity: Karat purity, 22 by default

    Returns:
        PriceEstimate with unrounded amounts

    Example:
        >>> round(calculate_price("10g", 50, 10).total_price, 2)
        504.17
    """
    weight_value = parse_measure_or_zero(weight)

    base_price = weight_value * gold_rate * (purity / FULL_PURITY_KARATS)
    making_charge_amount = base_price * making_charge_percent / 100

    return PriceEstimate(
        weight=weight_value,
        purity=purity,
        gold_rate=gold_rate,
        making_charge_percent=making_charge_percent,
        base_price=base_price,
        making_charge_amount=making_charge_amount,
        total_price=base_price + making_charge_amount,
    )

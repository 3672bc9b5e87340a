"""
==============================================================================
Catalog View State
==============================================================================

Which product panel a catalog client is showing, as one immutable value.

A client is in exactly one mode at a time; every mode other than NONE
concerns exactly one product. Transitions return new values.

    NONE ──view(p)────────▶ VIEWING
      │  ──quick_view(p)──▶ QUICK_VIEW
      │  ──calculate(p)───▶ CALCULATING
      ◀──────close()──────── (any)

==============================================================================
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .models import Product
from .pricing import DEFAULT_PURITY_KARATS, PriceEstimate, calculate_price


class ViewMode(str, enum.Enum):
    NONE = "none"
    VIEWING = "viewing"
    QUICK_VIEW = "quickView"
    CALCULATING = "calculating"

    def __str__(self) -> str:
        return self.value


class ViewState(BaseModel):
    """
    Immutable catalog panel state with price calculator inputs.

    Example:
        >>> state = ViewState().calculate(product).with_rates(gold_rate=50)
        >>> state.mode
        <ViewMode.CALCULATING: 'calculating'>
        >>> state.close().product is None
        True
    """

    model_config = ConfigDict(frozen=True)

    mode: ViewMode = ViewMode.NONE
    product: Optional[Product] = None
    gold_rate: float = Field(default=0, ge=0)
    making_charge: float = Field(default=10, ge=0)
    purity: float = Field(default=DEFAULT_PURITY_KARATS, gt=0, le=24)

    @model_validator(mode="after")
    def check_mode_product(self) -> "ViewState":
        if self.mode == ViewMode.NONE and self.product is not None:
            raise ValueError("A closed view cannot hold a product")
        if self.mode != ViewMode.NONE and self.product is None:
            raise ValueError(f"Mode {self.mode.value} needs a product")
        return self

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def _open(self, mode: ViewMode, product: Product) -> "ViewState":
        return ViewState(
            mode=mode,
            product=product,
            gold_rate=self.gold_rate,
            making_charge=self.making_charge,
            purity=self.purity,
        )

    def view(self, product: Product) -> "ViewState":
        return self._open(ViewMode.VIEWING, product)

    def quick_view(self, product: Product) -> "ViewState":
        return self._open(ViewMode.QUICK_VIEW, product)

    def calculate(self, product: Product) -> "ViewState":
        return self._open(ViewMode.CALCULATING, product)

    def close(self) -> "ViewState":
        return ViewState(
            gold_rate=self.gold_rate,
            making_charge=self.making_charge,
            purity=self.purity,
        )

    def with_rates(
        self,
        gold_rate: Optional[float] = None,
        making_charge: Optional[float] = None,
        purity: Optional[float] = None
    ) -> "ViewState":
        """Change calculator inputs, keeping mode and product."""
        return ViewState(
            mode=self.mode,
            product=self.product,
            gold_rate=self.gold_rate if gold_rate is None else gold_rate,
            making_charge=self.making_charge if making_charge is None else making_charge,
            purity=self.purity if purity is None else purity,
        )

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def is_open(self) -> bool:
        return self.mode != ViewMode.NONE

    def estimate(self) -> Optional[PriceEstimate]:
        """
        Price breakdown shown by the calculator.

        None outside calculating. A missing weight or a zero gold rate
        gives an all-zero breakdown.
        """
        if self.mode != ViewMode.CALCULATING:
            return None
        return calculate_price(
            self.product.weight,
            self.gold_rate,
            self.making_charge,
            purity=self.purity,
        )

"""
==============================================================================
Catalog Schemas Module
==============================================================================

Request schemas for the public catalog endpoints.

==============================================================================
"""

from typing import Optional

from pydantic import BaseModel, Field


class PriceEstimateRequest(BaseModel):
    """Ad-hoc price estimate for a weight string."""
    weight: str = Field(..., max_length=50, description="Weight display string, e.g. '10g'")
    gold_rate: Optional[float] = Field(default=None, ge=0, description="Gold rate per gram")
    making_charge: Optional[float] = Field(default=None, ge=0, description="Making charge percent")
    purity: Optional[float] = Field(default=None, gt=0, le=24, description="Karat purity")

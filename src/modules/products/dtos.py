"""Product DTOs for the Service Layer.

Pydantic v2 contracts between the DRF views and ``ProductService``.
All DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.products.constants import MAX_RATING, MIN_RATING

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category: str = Field(min_length=1, max_length=100)
    stock: int = Field(ge=0)
    images: List[str] = Field(default_factory=list)
    specifications: Dict[str, str] = Field(default_factory=dict)
    delivery_charges_applicable: bool = True
    delivery_charges: Decimal = Field(
        default=Decimal("0"), ge=0, max_digits=10, decimal_places=2
    )


class UpdateProductDTO(BaseModel):
    """Partial update; ``images`` are appended to the existing list."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    stock: Optional[int] = Field(default=None, ge=0)
    images: List[str] = Field(default_factory=list)
    specifications: Optional[Dict[str, str]] = None
    delivery_charges_applicable: Optional[bool] = None
    delivery_charges: Optional[Decimal] = Field(
        default=None, ge=0, max_digits=10, decimal_places=2
    )


class ProductQueryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: Optional[str] = None
    search: Optional[str] = None
    sort: Optional[str] = None


class CreateReviewDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    rating: int = Field(ge=MIN_RATING, le=MAX_RATING)
    comment: str = Field(default="", max_length=2000)

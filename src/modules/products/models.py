"""Product and Review models.

Business rules implemented:
- Stock is never negative: database check constraint, and every decrement
  goes through a conditional ``UPDATE`` in the repository.
- Price and per-unit delivery charge are non-negative.
- Soft delete via ``deleted_at``: deleted products leave the catalog but
  stay resolvable so cancelled orders can put their stock back.
- ``average_rating`` / ``total_reviews`` are denormalised from ``Review``.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel, SoftDeleteModel
from modules.products.constants import (
    DEFAULT_SPECIFICATIONS,
    MAX_RATING,
    MIN_RATING,
    NOT_SPECIFIED,
)


class Product(SoftDeleteModel):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    category = models.CharField(max_length=100, db_index=True)
    stock = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    delivery_charges_applicable = models.BooleanField(default=True)
    delivery_charges = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    images = models.JSONField(default=list, blank=True)
    specifications = models.JSONField(default=dict, blank=True)
    average_rating = models.DecimalField(
        max_digits=2, decimal_places=1, default=Decimal("0.0")
    )
    total_reviews = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="products_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(delivery_charges__gte=0),
                name="products_delivery_charges_non_negative",
            ),
        ]

    @property
    def display_specifications(self) -> dict:
        """Specifications with the standard keys filled in."""
        specs = {key: NOT_SPECIFIED for key in DEFAULT_SPECIFICATIONS}
        specs.update({k: v for k, v in (self.specifications or {}).items() if v})
        return specs

    def __str__(self) -> str:
        return f"{self.name} ({self.stock} in stock)"


class Review(BaseModel):
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_RATING), MaxValueValidator(MAX_RATING)]
    )
    comment = models.TextField(blank=True, default="")

    class Meta:
        db_table = "product_reviews"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rating__gte=MIN_RATING, rating__lte=MAX_RATING),
                name="product_reviews_rating_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.rating}/5 on {self.product_id}"

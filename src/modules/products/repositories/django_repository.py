"""Django ORM implementation of the Product repository.

Stock mutations never read-modify-write in Python: they are single
``UPDATE`` statements with ``F()`` expressions, guarded by ``stock >= n`` for
decrements, so concurrent orders cannot oversell.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Avg, Count, F, QuerySet

from modules.products.constants import ProductSort
from modules.products.models import Product, Review
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str, include_deleted: bool = False) -> Optional[Product]:
        """Returns ``None`` for missing, soft-deleted or malformed ids."""
        queryset = Product.objects.all() if include_deleted else Product.objects.alive()
        try:
            return queryset.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_many(
        self, ids: Iterable[str], include_deleted: bool = False
    ) -> Dict[str, Product]:
        queryset = Product.objects.all() if include_deleted else Product.objects.alive()
        try:
            return {str(p.id): p for p in queryset.filter(id__in=list(ids))}
        except (ValueError, ValidationError):
            return {}

    def list(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> QuerySet[Product]:
        queryset = Product.objects.alive()
        if category:
            queryset = queryset.filter(category__iexact=category)
        if search:
            queryset = queryset.filter(name__icontains=search)
        ordering = ProductSort.ORDERING.get(sort or "", ProductSort.ORDERING[ProductSort.NEWEST])
        return queryset.order_by(*ordering)

    def count(self) -> int:
        return Product.objects.alive().count()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        entity.save()
        logger.info("product.saved", product_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True

    # ------------------------------------------------------------------
    # Stock primitives
    # ------------------------------------------------------------------

    def decrement_stock(self, id: str, quantity: int) -> bool:
        updated = Product.objects.filter(id=id, stock__gte=quantity).update(
            stock=F("stock") - quantity
        )
        return updated == 1

    def increment_stock(self, id: str, quantity: int) -> bool:
        updated = Product.objects.filter(id=id).update(stock=F("stock") + quantity)
        return updated == 1

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_review(
        self, product: Product, user_id: str, rating: int, comment: str
    ) -> Review:
        review = Review.objects.create(
            product=product, user_id=user_id, rating=rating, comment=comment
        )
        stats = Review.objects.filter(product=product).aggregate(
            avg=Avg("rating"), total=Count("id")
        )
        average = Decimal(str(stats["avg"] or 0)).quantize(
            Decimal("0.1"), rounding=ROUND_HALF_UP
        )
        product.average_rating = average
        product.total_reviews = stats["total"]
        product.save(update_fields=["average_rating", "total_reviews"])
        logger.info(
            "product.review_added",
            product_id=str(product.id),
            rating=rating,
            average_rating=str(average),
        )
        return review

"""Product service layer (Use Cases).

Catalog reads are public; writes are admin-only (enforced by the views).
Deleting a product is a soft delete so existing orders keep resolving it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

from modules.products.exceptions import ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.core.authentication import Caller
    from modules.products.dtos import (
        CreateProductDTO,
        CreateReviewDTO,
        ProductQueryDTO,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "description",
    "price",
    "category",
    "stock",
    "specifications",
    "delivery_charges_applicable",
    "delivery_charges",
)


class ProductService:
    """Application service for Product use-cases."""

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, query: ProductQueryDTO) -> QuerySet[Product]:
        return self._repo.list(
            category=query.category, search=query.search, sort=query.sort
        )

    def get_product(self, id: str) -> Product:
        """Raises ``ProductNotFound`` for missing or soft-deleted products."""
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound()
        return product

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        product = self._repo.save(Product(**dto.model_dump()))
        logger.info("product.created", product_id=str(product.id), stock=product.stock)
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Apply the supplied fields; new images are appended, not replaced."""
        product = self.get_product(id)
        for field in UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)
        if dto.images:
            product.images = [*(product.images or []), *dto.images]

        product = self._repo.save(product)
        logger.info("product.updated", product_id=str(id))
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        if not self._repo.delete(id):
            raise ProductNotFound()

    @transaction.atomic
    def add_review(self, caller: Caller, id: str, dto: CreateReviewDTO) -> Product:
        product = self.get_product(id)
        self._repo.add_review(product, str(caller.user_id), dto.rating, dto.comment)
        return product

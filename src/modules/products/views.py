"""Product API views.

Exposes ``ProductService`` over HTTP. Reads are public, reviews need an
authenticated user, catalog writes need the admin role.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.authentication import caller_from_request
from modules.core.pagination import StandardResultsSetPagination
from modules.core.permissions import IsAdmin
from modules.products.dtos import (
    CreateProductDTO,
    CreateReviewDTO,
    ProductQueryDTO,
    UpdateProductDTO,
)
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories import ProductDjangoRepository
from modules.products.serializers import ProductDetailSerializer, ProductSerializer
from modules.products.services import ProductService


class ProductPagination(StandardResultsSetPagination):
    page_size = 20
    results_key = "products"


class ProductViewSet(ListModelMixin, GenericViewSet):
    """``/api/products/``: catalog, admin management and reviews."""

    queryset = Product.objects.alive()
    serializer_class = ProductSerializer
    pagination_class = ProductPagination
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend]

    PUBLIC_ACTIONS = {"list", "retrieve", "by_category", "search"}

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_permissions(self):
        if self.action in self.PUBLIC_ACTIONS:
            return [AllowAny()]
        if self.action == "reviews":
            return [IsAuthenticated()]
        return [IsAdmin()]

    def get_queryset(self):
        params = self.request.query_params
        return self._service.list_products(
            ProductQueryDTO(
                category=params.get("category") or None,
                search=params.get("search") or None,
                sort=params.get("sort") or None,
            )
        )

    def _list_response(self, queryset) -> Response:
        page = self.paginate_queryset(queryset)
        serializer = ProductSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    # ------------------------------------------------------------------
    # Public catalog
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        product = self._service.get_product(pk)
        return Response(
            {"success": True, "product": ProductDetailSerializer(product).data}
        )

    @action(detail=False, methods=["get"], url_path=r"category/(?P<category>[^/]+)")
    def by_category(self, request: Request, category: str) -> Response:
        return self._list_response(
            self._service.list_products(ProductQueryDTO(category=category))
        )

    @action(detail=False, methods=["get"], url_path=r"search/(?P<query>[^/]+)")
    def search(self, request: Request, query: str) -> Response:
        return self._list_response(
            self._service.list_products(ProductQueryDTO(search=query))
        )

    # ------------------------------------------------------------------
    # Admin management
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        product = self._service.create_product(
            CreateProductDTO.model_validate(request.data)
        )
        return Response(
            {
                "success": True,
                "message": "Product created successfully",
                "product": ProductSerializer(product).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        product = self._service.update_product(
            pk, UpdateProductDTO.model_validate(request.data)
        )
        return Response(
            {
                "success": True,
                "message": "Product updated successfully",
                "product": ProductSerializer(product).data,
            }
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        self._service.delete_product(pk)
        return Response({"success": True, "message": "Product deactivated successfully"})

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def reviews(self, request: Request, pk: str | None = None) -> Response:
        product = self._service.add_review(
            caller_from_request(request),
            pk,
            CreateReviewDTO.model_validate(request.data),
        )
        return Response(
            {"success": True, "product": ProductDetailSerializer(product).data},
            status=status.HTTP_201_CREATED,
        )

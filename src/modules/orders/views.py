"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.  Views build the
DTO and the ``Caller`` and let domain exceptions propagate to the
exception handler.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.authentication import caller_from_request
from modules.core.pagination import StandardResultsSetPagination
from modules.core.permissions import IsAdmin
from modules.orders.dtos import (
    CancelOrderDTO,
    CreateOrderDTO,
    PaymentVerificationDTO,
    RefundRequestDTO,
    UpdateOrderStatusDTO,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories import ProductDjangoRepository


class OrderPagination(StandardResultsSetPagination):
    results_key = "orders"


def build_order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    pagination_class = OrderPagination
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    ADMIN_ACTIONS = {"list", "update_status", "verify_payment"}

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_permissions(self):
        if self.action in self.ADMIN_ACTIONS:
            return [IsAdmin()]
        return [IsAuthenticated()]

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "order_creation" if self.action == "create" else None
        return super().get_throttles()

    def get_queryset(self):
        return self._service.list_orders()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self._service.create_order(
            caller_from_request(request), CreateOrderDTO(**serializer.validated_data)
        )
        return Response(
            {
                "success": True,
                "message": "Order created successfully",
                "order": OrderSerializer(order).data,
            },
            status=status.HTTP_201_CREATED,
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/orders/ (admin), filtered by ``OrderFilter``."""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=False, methods=["get"], url_path="my-orders")
    def my_orders(self, request: Request) -> Response:
        orders = self._service.list_my_orders(caller_from_request(request))
        return Response(
            {"success": True, "orders": OrderListSerializer(orders, many=True).data}
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        order = self._service.get_order(caller_from_request(request), pk)
        return Response({"success": True, "order": OrderSerializer(order).data})

    # ------------------------------------------------------------------
    # Admin workflow
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        order = self._service.update_status(
            caller_from_request(request),
            pk,
            UpdateOrderStatusDTO.model_validate(request.data),
        )
        return Response({"success": True, "order": OrderSerializer(order).data})

    @action(detail=True, methods=["put"], url_path="payment")
    def verify_payment(self, request: Request, pk: str | None = None) -> Response:
        order = self._service.verify_payment(
            caller_from_request(request),
            pk,
            PaymentVerificationDTO.model_validate(request.data),
        )
        return Response(
            {
                "success": True,
                "message": "Payment details updated successfully",
                "order": OrderSerializer(order).data,
            }
        )

    # ------------------------------------------------------------------
    # Customer actions
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        self._service.cancel_order(
            caller_from_request(request),
            pk,
            CancelOrderDTO.model_validate(request.data),
        )
        return Response({"success": True, "message": "Order cancelled successfully"})

    @action(detail=True, methods=["post"])
    def refund(self, request: Request, pk: str | None = None) -> Response:
        contact_number = self._service.submit_refund(
            caller_from_request(request),
            pk,
            RefundRequestDTO.model_validate(request.data),
        )
        return Response(
            {
                "success": True,
                "message": "Refund request submitted successfully",
                "contact_number": contact_number,
            }
        )

"""Customer API views (admin only).

Exposes the ``CustomerService`` via HTTP using DRF ViewSets.
"""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.models import User
from modules.accounts.repositories import UserDjangoRepository
from modules.accounts.serializers import CustomerSerializer, UserSerializer
from modules.core.authentication import caller_from_request
from modules.core.pagination import StandardResultsSetPagination
from modules.core.permissions import IsAdmin
from modules.customers.dtos import CustomerQueryDTO, CustomerStatusDTO
from modules.customers.services import CustomerService
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.serializers import OrderListSerializer


class CustomerPagination(StandardResultsSetPagination):
    results_key = "customers"


class CustomerViewSet(ListModelMixin, GenericViewSet):
    """``/api/customers/``: search, detail, activation and order history.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    permission_classes = [IsAdmin]
    queryset = User.objects.none()
    serializer_class = CustomerSerializer
    pagination_class = CustomerPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(
            user_repository=UserDjangoRepository(),
            order_repository=OrderDjangoRepository(),
        )

    def get_queryset(self):
        return self._service.list_customers(
            CustomerQueryDTO(search=self.request.query_params.get("search", ""))
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        customer = self._service.get_customer(pk)
        return Response({"success": True, "customer": UserSerializer(customer).data})

    @action(detail=True, methods=["put"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        self._service.set_status(
            caller_from_request(request),
            pk,
            CustomerStatusDTO.model_validate(request.data),
        )
        return Response(
            {"success": True, "message": "Customer status updated successfully"}
        )

    @action(detail=True, methods=["get"])
    def orders(self, request: Request, pk: str | None = None) -> Response:
        orders = self._service.list_customer_orders(pk)
        return Response(
            {"success": True, "orders": OrderListSerializer(orders, many=True).data}
        )

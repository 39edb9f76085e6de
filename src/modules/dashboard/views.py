from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.repositories import UserDjangoRepository
from modules.core.permissions import IsAdmin
from modules.dashboard.services import DashboardService
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.serializers import OrderListSerializer
from modules.products.repositories import ProductDjangoRepository


class DashboardView(APIView):
    """``GET /api/admin/dashboard/``: catalog, order and user totals."""

    permission_classes = [IsAdmin]

    def get(self, request: Request) -> Response:
        stats = DashboardService(
            product_repository=ProductDjangoRepository(),
            order_repository=OrderDjangoRepository(),
            user_repository=UserDjangoRepository(),
        ).get_stats()
        return Response(
            {
                "success": True,
                "data": {
                    "total_products": stats.total_products,
                    "total_orders": stats.total_orders,
                    "total_users": stats.total_users,
                    "recent_orders": OrderListSerializer(
                        stats.recent_orders, many=True
                    ).data,
                },
            }
        )

"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from collections.abc import Mapping

from rest_framework import serializers

from modules.orders.constants import PaymentMethod
from modules.orders.models import Order, OrderItem, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single item in an order creation request."""

    product = serializers.CharField()
    quantity = serializers.IntegerField(
        min_value=1,
        error_messages={"min_value": "Item quantity must be a positive integer"},
    )
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        error_messages={"min_value": "Item price must be a positive number"},
    )
    name = serializers.CharField(required=False, allow_blank=True)

    def to_internal_value(self, data):
        # Cart lines from the storefront carry the product id as ``_id``.
        if isinstance(data, Mapping) and "product" not in data and "_id" in data:
            data = {**data, "product": data["_id"]}
        return super().to_internal_value(data)


class ShippingAddressSerializer(serializers.Serializer):
    full_name = serializers.CharField(min_length=2, max_length=100)
    address_line1 = serializers.CharField(min_length=5, max_length=200)
    address_line2 = serializers.CharField(
        required=False, allow_blank=True, max_length=200, default=""
    )
    city = serializers.CharField(min_length=2, max_length=50)
    state = serializers.CharField(min_length=2, max_length=50)
    postal_code = serializers.RegexField(
        r"^[0-9]{6}$", error_messages={"invalid": "Postal code must be 6 digits"}
    )
    phone = serializers.RegexField(
        r"^[0-9]{10}$", error_messages={"invalid": "Phone must be exactly 10 digits"}
    )


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    items = CreateOrderItemSerializer(
        many=True,
        allow_empty=False,
        error_messages={"empty": "Items must be a non-empty array"},
    )
    shipping_address = ShippingAddressSerializer()
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderUserSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with the purchase-time snapshot."""

    product = serializers.UUIDField(source="product_id", read_only=True, allow_null=True)
    image = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "product_name",
            "image",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields

    def get_image(self, obj: OrderItem):
        product = obj.product
        if product is None or not product.images:
            return None
        return product.images[0]


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items and history."""

    user = OrderUserSerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "tracking_number",
            "user",
            "status",
            "items",
            "subtotal",
            "delivery_charge",
            "total_amount",
            "shipping_address",
            "payment_method",
            "payment_status",
            "payment_details",
            "cancellation_reason",
            "refund_details",
            "expected_delivery_date",
            "courier_service",
            "created_at",
            "updated_at",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lighter serializer for order lists (no history)."""

    user = OrderUserSerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "tracking_number",
            "user",
            "status",
            "items",
            "total_amount",
            "payment_method",
            "payment_status",
            "created_at",
        ]
        read_only_fields = fields

"""Account DRF serializers (read side).

Input validation is done by the pydantic DTOs in ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import Address, User


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = [
            "id",
            "full_name",
            "address_line1",
            "address_line2",
            "city",
            "state",
            "pincode",
            "phone",
            "is_default",
        ]
        read_only_fields = fields


class AuthUserSerializer(serializers.ModelSerializer):
    """Compact identity returned by register / login / me."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "role"]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    addresses = AddressSerializer(many=True, read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "role",
            "is_active",
            "addresses",
            "created_at",
        ]
        read_only_fields = fields


class CustomerSerializer(serializers.ModelSerializer):
    """Admin view of a customer: the phone number is masked."""

    phone = serializers.CharField(source="masked_phone", read_only=True)

    class Meta:
        model = User
        fields = ["id", "name", "email", "phone", "is_active", "created_at"]
        read_only_fields = fields

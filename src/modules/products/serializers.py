"""Product DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product, Review


class ReviewSerializer(serializers.ModelSerializer):
    user_name = serializers.CharField(source="user.name", read_only=True)

    class Meta:
        model = Review
        fields = ["id", "user_id", "user_name", "rating", "comment", "created_at"]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    specifications = serializers.DictField(
        source="display_specifications", read_only=True
    )

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "category",
            "stock",
            "images",
            "specifications",
            "delivery_charges_applicable",
            "delivery_charges",
            "average_rating",
            "total_reviews",
            "created_at",
        ]
        read_only_fields = fields


class ProductDetailSerializer(ProductSerializer):
    reviews = ReviewSerializer(many=True, read_only=True)

    class Meta(ProductSerializer.Meta):
        fields = [*ProductSerializer.Meta.fields, "reviews"]
        read_only_fields = fields

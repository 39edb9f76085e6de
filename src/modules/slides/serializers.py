from rest_framework import serializers

from modules.slides.models import Slide

PUBLIC_FIELDS = [
    "id",
    "title",
    "description",
    "image",
    "link",
    "link_text",
    "is_active",
    "display_order",
    "start_date",
    "end_date",
    "created_at",
]


class SlideSerializer(serializers.ModelSerializer):
    class Meta:
        model = Slide
        fields = PUBLIC_FIELDS
        read_only_fields = fields


class SlideCreatorSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)


class AdminSlideSerializer(serializers.ModelSerializer):
    created_by = SlideCreatorSerializer(read_only=True)

    class Meta:
        model = Slide
        fields = [*PUBLIC_FIELDS, "created_by", "updated_at"]
        read_only_fields = fields

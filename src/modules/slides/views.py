"""Slide API views.

``GET /api/slides/`` is public; everything under ``/api/slides/admin/``
needs the admin role.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.authentication import caller_from_request
from modules.core.permissions import IsAdmin
from modules.slides.dtos import CreateSlideDTO, UpdateSlideDTO
from modules.slides.repositories import SlideDjangoRepository
from modules.slides.serializers import AdminSlideSerializer, SlideSerializer
from modules.slides.services import SlideService


class SlideViewSet(GenericViewSet):
    permission_classes = [IsAdmin]
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = SlideService(repository=SlideDjangoRepository())

    def get_permissions(self):
        if self.action == "list":
            return [AllowAny()]
        return super().get_permissions()

    def list(self, request: Request) -> Response:
        slides = self._service.list_active()
        return Response(
            {"success": True, "slides": SlideSerializer(slides, many=True).data}
        )

    @action(detail=False, methods=["get"], url_path="admin/all")
    def admin_all(self, request: Request) -> Response:
        slides = self._service.list_all()
        return Response(
            {"success": True, "slides": AdminSlideSerializer(slides, many=True).data}
        )

    @action(detail=False, methods=["post"], url_path="admin")
    def admin_create(self, request: Request) -> Response:
        slide = self._service.create_slide(
            caller_from_request(request), CreateSlideDTO.model_validate(request.data)
        )
        return Response(
            {"success": True, "slide": AdminSlideSerializer(slide).data},
            status=status.HTTP_201_CREATED,
        )

    @action(
        detail=False,
        methods=["get", "put", "delete"],
        url_path=r"admin/(?P<slide_id>[^/.]+)",
        url_name="admin-detail",
    )
    def admin_detail(self, request: Request, slide_id: str) -> Response:
        if request.method == "DELETE":
            self._service.delete_slide(slide_id)
            return Response({"success": True, "message": "Slide deleted successfully"})
        if request.method == "PUT":
            slide = self._service.update_slide(
                slide_id, UpdateSlideDTO.model_validate(request.data)
            )
        else:
            slide = self._service.get_slide(slide_id)
        return Response({"success": True, "slide": AdminSlideSerializer(slide).data})

"""Slide URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.slides.views import SlideViewSet

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register("slides", SlideViewSet, basename="slide")

urlpatterns = router.urls

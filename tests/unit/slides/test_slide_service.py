"""Unit tests for slide DTOs and the carousel visibility window."""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone
from pydantic import ValidationError

from modules.slides.dtos import CreateSlideDTO, UpdateSlideDTO
from modules.slides.exceptions import SlideNotFound
from modules.slides.models import Slide
from modules.slides.repositories import SlideDjangoRepository
from modules.slides.services import SlideService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return SlideService(repository=SlideDjangoRepository())


def _slide(title, **fields):
    return Slide.objects.create(title=title, image=f"{title}.jpg", **fields)


class TestSlideDTOs:
    def test_title_and_image_required(self):
        with pytest.raises(ValidationError):
            CreateSlideDTO(title="Festive")

    def test_defaults(self):
        dto = CreateSlideDTO(title="Festive", image="festive.jpg")
        assert dto.link_text == "Shop Now"
        assert dto.is_active is True
        assert dto.display_order == 0

    def test_end_before_start_rejected(self):
        now = timezone.now()
        with pytest.raises(ValidationError, match="end_date must not be before start_date"):
            CreateSlideDTO(
                title="Festive",
                image="festive.jpg",
                start_date=now,
                end_date=now - timedelta(days=1),
            )

    def test_update_only_carries_sent_fields(self):
        dto = UpdateSlideDTO(title="Renamed", end_date=None)
        assert dto.changes() == {"title": "Renamed", "end_date": None}


class TestVisibility:
    def test_only_active_slides_inside_window(self, service):
        now = timezone.now()
        _slide("always")
        _slide("inactive", is_active=False)
        _slide("future", start_date=now + timedelta(days=1))
        _slide("expired", end_date=now - timedelta(days=1))
        _slide("running", start_date=now - timedelta(days=1), end_date=now + timedelta(days=1))

        titles = {s.title for s in service.list_active(at=now)}
        assert titles == {"always", "running"}

    def test_ordered_by_display_order(self, service):
        _slide("second", display_order=2)
        _slide("first", display_order=1)
        assert [s.title for s in service.list_active()] == ["first", "second"]

    def test_admin_list_includes_hidden(self, service):
        _slide("inactive", is_active=False)
        assert service.list_all().count() == 1


class TestSlideCommands:
    def test_create_records_author(self, service, admin_caller, admin_user):
        slide = service.create_slide(
            admin_caller, CreateSlideDTO(title="Festive", image="festive.jpg")
        )
        assert slide.created_by_id == admin_user.id

    def test_update_clears_window(self, service):
        slide = _slide("sale", end_date=timezone.now() + timedelta(days=3))
        updated = service.update_slide(str(slide.id), UpdateSlideDTO(end_date=None))
        assert updated.end_date is None
        assert updated.title == "sale"

    def test_delete_is_permanent(self, service):
        slide = _slide("old")
        service.delete_slide(str(slide.id))
        assert not Slide.objects.filter(id=slide.id).exists()

    def test_unknown_slide(self, service):
        with pytest.raises(SlideNotFound):
            service.get_slide("0190c1e2-7a3b-7c4d-8e5f-001122334455")

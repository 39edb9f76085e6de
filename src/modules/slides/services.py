"""Slide service layer: public carousel and admin management."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction
from django.utils import timezone

from modules.slides.exceptions import SlideNotFound
from modules.slides.models import Slide

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.core.authentication import Caller
    from modules.slides.dtos import CreateSlideDTO, UpdateSlideDTO
    from modules.slides.repositories.interfaces import ISlideRepository

logger = structlog.get_logger(__name__)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and timezone.is_naive(value):
        return timezone.make_aware(value)
    return value


class SlideService:
    def __init__(self, repository: ISlideRepository) -> None:
        self._repo = repository

    def list_active(self, at: Optional[datetime] = None) -> QuerySet[Slide]:
        return self._repo.list_visible(at or timezone.now())

    def list_all(self) -> QuerySet[Slide]:
        return self._repo.list_all()

    def get_slide(self, slide_id: str) -> Slide:
        slide = self._repo.get_by_id(slide_id)
        if slide is None:
            raise SlideNotFound()
        return slide

    @transaction.atomic
    def create_slide(self, caller: Caller, dto: CreateSlideDTO) -> Slide:
        data = dto.model_dump()
        data["start_date"] = _aware(data["start_date"])
        data["end_date"] = _aware(data["end_date"])
        slide = self._repo.save(Slide(created_by_id=caller.user_id, **data))
        logger.info("slide.created", slide_id=str(slide.id))
        return slide

    @transaction.atomic
    def update_slide(self, slide_id: str, dto: UpdateSlideDTO) -> Slide:
        slide = self.get_slide(slide_id)
        for field, value in dto.changes().items():
            if field in ("start_date", "end_date"):
                value = _aware(value)
            setattr(slide, field, value)
        return self._repo.save(slide)

    @transaction.atomic
    def delete_slide(self, slide_id: str) -> None:
        self._repo.delete(self.get_slide(slide_id))

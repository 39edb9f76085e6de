"""Django ORM implementation of the Slide repository."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, QuerySet

from modules.slides.models import Slide
from modules.slides.repositories.interfaces import ISlideRepository

logger = structlog.get_logger(__name__)

ORDERING = ("display_order", "-created_at")


class SlideDjangoRepository(ISlideRepository):
    def get_by_id(self, id: str) -> Optional[Slide]:
        try:
            return Slide.objects.select_related("created_by").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list_visible(self, at: datetime) -> QuerySet[Slide]:
        return (
            Slide.objects.filter(is_active=True)
            .filter(Q(start_date__isnull=True) | Q(start_date__lte=at))
            .filter(Q(end_date__isnull=True) | Q(end_date__gte=at))
            .order_by(*ORDERING)
        )

    def list_all(self) -> QuerySet[Slide]:
        return Slide.objects.select_related("created_by").order_by(*ORDERING)

    @transaction.atomic
    def save(self, entity: Slide) -> Slide:
        entity.save()
        logger.info("slide.saved", slide_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, entity: Slide) -> None:
        slide_id = str(entity.id)
        entity.delete()
        logger.info("slide.deleted", slide_id=slide_id)

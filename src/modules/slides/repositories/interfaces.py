"""Slide repository interface."""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.slides.models import Slide


class ISlideRepository(IRepository["Slide"]):
    @abstractmethod
    def list_visible(self, at: datetime) -> QuerySet[Slide]:
        """Active slides whose date window contains ``at``."""

    @abstractmethod
    def list_all(self) -> QuerySet[Slide]:
        """Every slide, for administration."""

    @abstractmethod
    def delete(self, entity: Slide) -> None:
        """Remove a slide permanently."""

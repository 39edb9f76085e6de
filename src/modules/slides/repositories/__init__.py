"""Slide repositories package."""

from modules.slides.repositories.django_repository import SlideDjangoRepository
from modules.slides.repositories.interfaces import ISlideRepository

__all__ = ["ISlideRepository", "SlideDjangoRepository"]

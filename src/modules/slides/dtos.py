"""Slide DTOs for the Service Layer.

Images are URLs or storage references supplied by the client.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from modules.slides.models import DEFAULT_LINK_TEXT

# Sending these as null clears them.
NULLABLE_FIELDS = frozenset({"start_date", "end_date"})


class _SlideWindowDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @model_validator(mode="after")
    def end_not_before_start(self):
        start, end = self.start_date, self.end_date
        if start is None or end is None:
            return self
        if (start.tzinfo is None) == (end.tzinfo is None) and end < start:
            raise ValueError("end_date must not be before start_date")
        return self


class CreateSlideDTO(_SlideWindowDTO):
    title: str = Field(min_length=1, max_length=200)
    image: str = Field(min_length=1, max_length=500)
    description: str = ""
    link: str = Field(default="", max_length=500)
    link_text: str = Field(default=DEFAULT_LINK_TEXT, max_length=100)
    is_active: bool = True
    display_order: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class UpdateSlideDTO(_SlideWindowDTO):
    """Partial update: only the fields present in the request are applied.

    Sending ``start_date`` / ``end_date`` as ``null`` clears the window.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    image: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    link: Optional[str] = Field(default=None, max_length=500)
    link_text: Optional[str] = Field(default=None, max_length=100)
    is_active: Optional[bool] = None
    display_order: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def changes(self) -> dict:
        return {
            field: getattr(self, field)
            for field in self.model_fields_set
            if getattr(self, field) is not None or field in NULLABLE_FIELDS
        }

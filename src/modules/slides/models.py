"""Promotional slides (home page banners).

A slide is shown while it is active and ``now`` falls inside its optional
``start_date`` / ``end_date`` window, ordered by ``display_order``.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel

DEFAULT_LINK_TEXT = "Shop Now"


class Slide(BaseModel):
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    image = models.CharField(max_length=500)
    link = models.CharField(max_length=500, blank=True, default="")
    link_text = models.CharField(max_length=100, default=DEFAULT_LINK_TEXT)
    is_active = models.BooleanField(default=True)
    display_order = models.IntegerField(default=0)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="slides",
    )

    class Meta:
        db_table = "slides"
        ordering = ["display_order", "-created_at"]
        indexes = [
            models.Index(
                fields=["is_active", "display_order"], name="slides_active_order_idx"
            ),
        ]

    def __str__(self) -> str:
        return self.title

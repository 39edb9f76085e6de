"""Slide domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class SlideNotFound(NotFound):
    default_message = "Slide not found"

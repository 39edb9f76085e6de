"""BaseModel and SoftDeleteModel behaviour, exercised through real models.

``Slide`` is a plain ``BaseModel``; ``Product`` is soft-deletable.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest
from freezegun import freeze_time

from django.utils import timezone

from modules.core.models import SoftDeleteManager, SoftDeleteQuerySet
from modules.products.models import Product
from modules.slides.models import Slide

pytestmark = pytest.mark.unit


def _slide(title="Festive Sale"):
    return Slide.objects.create(title=title, image="slides/festive.jpg")


def _product(name="Handloom Stole"):
    return Product.objects.create(
        name=name, price=Decimal("350.00"), category="stoles", stock=3
    )


class TestBaseModel:
    def test_id_is_uuid7(self):
        slide = _slide()
        assert isinstance(slide.id, uuid.UUID)
        assert slide.id.version == 7

    def test_ids_are_time_ordered(self):
        first = _slide("first")
        second = _slide("second")
        assert str(first.id) < str(second.id)

    def test_timestamps_set_on_create(self):
        slide = _slide()
        assert slide.created_at is not None
        assert slide.updated_at is not None

    def test_update_fields_still_refreshes_updated_at(self):
        slide = _slide()
        before = slide.updated_at
        slide.title = "Monsoon Sale"
        slide.save(update_fields=["title"])
        slide.refresh_from_db()
        assert slide.updated_at > before
        assert slide.title == "Monsoon Sale"

    def test_created_at_is_stable(self):
        slide = _slide()
        created = slide.created_at
        slide.display_order = 4
        slide.save()
        slide.refresh_from_db()
        assert slide.created_at == created

    def test_id_is_not_editable(self):
        assert Slide._meta.get_field("id").editable is False


class TestSoftDeleteModel:
    def test_new_product_is_alive(self):
        product = _product()
        assert product.is_deleted is False
        assert product.deleted_at is None

    def test_delete_marks_row(self):
        product = _product()
        result = product.delete()
        product.refresh_from_db()
        assert product.is_deleted is True
        assert result == (1, {"products.Product": 1})

    def test_second_delete_is_noop(self):
        product = _product()
        product.delete()
        assert product.delete() == (0, {})

    def test_deleted_row_still_resolvable_by_id(self):
        product = _product()
        product.delete()
        assert Product.objects.filter(pk=product.pk).exists()
        assert not Product.objects.alive().filter(pk=product.pk).exists()

    def test_hard_delete_removes_row(self):
        product = _product()
        product.hard_delete()
        assert not Product.objects.filter(pk=product.pk).exists()

    @freeze_time("2025-06-15 12:00:00")
    def test_delete_records_current_time(self):
        product = _product()
        product.delete()
        product.refresh_from_db()
        assert product.deleted_at == timezone.now()


class TestSoftDeleteQuerySet:
    def test_bulk_delete_skips_already_deleted(self):
        a = _product("Stole A")
        b = _product("Stole B")
        a.delete()
        count, _ = Product.objects.filter(pk__in=[a.pk, b.pk]).delete()
        assert count == 1
        b.refresh_from_db()
        assert b.is_deleted is True

    def test_bulk_hard_delete(self):
        a = _product("Stole A")
        Product.objects.filter(pk=a.pk).hard_delete()
        assert not Product.objects.filter(pk=a.pk).exists()

    def test_manager_types(self):
        assert isinstance(Product.objects, SoftDeleteManager)
        assert isinstance(Product.objects.all(), SoftDeleteQuerySet)

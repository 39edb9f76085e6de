"""Integration test for the development seed command."""

from io import StringIO

import pytest
from django.core.management import call_command

from modules.accounts.models import User
from modules.orders.models import Order
from modules.products.models import Product
from modules.slides.models import Slide

pytestmark = pytest.mark.integration


def test_seed_data_is_idempotent():
    out = StringIO()
    call_command("seed_data", stdout=out)
    assert "Seed completed" in out.getvalue()

    orders = Order.objects.count()
    assert User.objects.filter(role="admin").count() == 1
    assert Product.objects.count() == 10
    assert Slide.objects.count() == 3
    assert orders > 0
    assert not Product.objects.filter(stock__lt=0).exists()

    call_command("seed_data", stdout=StringIO())
    assert Product.objects.count() == 10
    assert Order.objects.count() == orders

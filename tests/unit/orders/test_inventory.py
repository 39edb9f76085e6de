"""Unit tests for InventoryService stock reconciliation."""

from __future__ import annotations

from unittest import mock

import pytest

from modules.core.exceptions import InsufficientStock
from modules.orders.inventory import InventoryService, StockLine
from modules.products.exceptions import ProductNotFound
from modules.products.repositories import ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def inventory():
    return InventoryService(ProductDjangoRepository())


def _stock(product) -> int:
    product.refresh_from_db()
    return product.stock


class TestReserve:
    def test_decrements_every_line(self, inventory, silk_saree, cotton_dupatta):
        inventory.reserve(
            [
                StockLine(str(silk_saree.id), 2),
                StockLine(str(cotton_dupatta.id), 4),
            ]
        )
        assert _stock(silk_saree) == 3
        assert _stock(cotton_dupatta) == 6

    def test_repeated_product_quantities_are_summed(self, inventory, silk_saree):
        with pytest.raises(InsufficientStock) as exc_info:
            inventory.reserve(
                [StockLine(str(silk_saree.id), 3), StockLine(str(silk_saree.id), 3)]
            )
        assert exc_info.value.requested == 6
        assert exc_info.value.available == 5
        assert _stock(silk_saree) == 5

    def test_all_or_nothing(self, inventory, silk_saree, cotton_dupatta):
        with pytest.raises(InsufficientStock):
            inventory.reserve(
                [
                    StockLine(str(cotton_dupatta.id), 1),
                    StockLine(str(silk_saree.id), 6),
                ]
            )
        assert _stock(silk_saree) == 5
        assert _stock(cotton_dupatta) == 10

    def test_insufficient_stock_message(self, inventory, silk_saree):
        with pytest.raises(InsufficientStock) as exc_info:
            inventory.reserve([StockLine(str(silk_saree.id), 9)])
        assert exc_info.value.message == (
            "Insufficient stock for product: Kanjivaram Silk Saree. "
            "Available: 5, Requested: 9"
        )

    def test_missing_product(self, inventory):
        missing = "0190c1e2-7a3b-7c4d-8e5f-001122334455"
        with pytest.raises(ProductNotFound) as exc_info:
            inventory.reserve([StockLine(missing, 1)])
        assert missing in exc_info.value.message

    def test_soft_deleted_product_cannot_be_reserved(self, inventory, silk_saree):
        silk_saree.delete()
        with pytest.raises(ProductNotFound):
            inventory.reserve([StockLine(str(silk_saree.id), 1)])

    def test_lost_race_rolls_back_earlier_lines(
        self, inventory, silk_saree, cotton_dupatta
    ):
        """Another order empties the saree between the check and the update."""
        real_decrement = ProductDjangoRepository.decrement_stock

        def decrement(repo, product_id, quantity):
            if product_id == str(silk_saree.id):
                return False
            return real_decrement(repo, product_id, quantity)

        with mock.patch.object(
            ProductDjangoRepository,
            "decrement_stock",
            autospec=True,
            side_effect=decrement,
        ) as patched:
            with pytest.raises(InsufficientStock) as exc_info:
                inventory.reserve(
                    [
                        StockLine(str(cotton_dupatta.id), 2),
                        StockLine(str(silk_saree.id), 1),
                    ]
                )

        assert patched.call_count == 2
        assert exc_info.value.requested == 1
        assert "Kanjivaram Silk Saree" in exc_info.value.message
        assert _stock(cotton_dupatta) == 10
        assert _stock(silk_saree) == 5


class TestRelease:
    def test_increments_stock(self, inventory, silk_saree):
        inventory.release([StockLine(str(silk_saree.id), 3)])
        assert _stock(silk_saree) == 8

    def test_skips_lines_without_product(self, inventory, silk_saree):
        inventory.release(
            [StockLine(None, 4), StockLine(str(silk_saree.id), 1)]
        )
        assert _stock(silk_saree) == 6

    def test_soft_deleted_product_gets_stock_back(self, inventory, silk_saree):
        silk_saree.delete()
        inventory.release([StockLine(str(silk_saree.id), 2)])
        assert _stock(silk_saree) == 7


class TestReapply:
    def test_decrements_stock(self, inventory, silk_saree):
        inventory.reapply([StockLine(str(silk_saree.id), 2)])
        assert _stock(silk_saree) == 3

    def test_failure_rolls_back_earlier_lines(
        self, inventory, silk_saree, cotton_dupatta
    ):
        with pytest.raises(InsufficientStock) as exc_info:
            inventory.reapply(
                [
                    StockLine(str(cotton_dupatta.id), 2),
                    StockLine(str(silk_saree.id), 6),
                ]
            )
        assert exc_info.value.message == (
            "Cannot change order status: Insufficient stock for product "
            "Kanjivaram Silk Saree. Available: 5, Required: 6"
        )
        assert _stock(cotton_dupatta) == 10

    def test_skips_missing_products(self, inventory, silk_saree):
        inventory.reapply(
            [
                StockLine("0190c1e2-7a3b-7c4d-8e5f-001122334455", 1),
                StockLine(str(silk_saree.id), 1),
            ]
        )
        assert _stock(silk_saree) == 4

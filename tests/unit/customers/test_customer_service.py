"""Unit tests for CustomerService (admin customer management)."""

from __future__ import annotations

import pytest

from modules.accounts.repositories import UserDjangoRepository
from modules.customers.dtos import CustomerQueryDTO, CustomerStatusDTO
from modules.customers.exceptions import CustomerNotFound
from modules.customers.services import CustomerService
from modules.orders.repositories import OrderDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return CustomerService(
        user_repository=UserDjangoRepository(),
        order_repository=OrderDjangoRepository(),
    )


class TestCustomerQueries:
    def test_lists_only_user_accounts(self, service, user, other_user, admin_user):
        customers = service.list_customers(CustomerQueryDTO())
        assert {c.email for c in customers} == {user.email, other_user.email}

    @pytest.mark.parametrize("term", ["asha", "ASHA@EXAMPLE", "543210"])
    def test_search_by_name_email_or_phone(self, service, user, other_user, term):
        customers = service.list_customers(CustomerQueryDTO(search=term))
        assert [c.id for c in customers] == [user.id]

    def test_admin_is_not_a_customer(self, service, admin_user):
        with pytest.raises(CustomerNotFound):
            service.get_customer(str(admin_user.id))

    def test_masked_phone(self, user):
        assert user.masked_phone == "xxxxxx3210"


class TestCustomerStatus:
    def test_deactivate(self, service, admin_caller, user):
        service.set_status(admin_caller, str(user.id), CustomerStatusDTO(is_active=False))
        user.refresh_from_db()
        assert user.is_active is False

    def test_status_must_be_boolean(self):
        with pytest.raises(ValueError):
            CustomerStatusDTO(is_active="yes")

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.accounts.constants import UserRole
from modules.accounts.services import issue_tokens
from modules.core.authentication import Caller
from modules.products.models import Product

User = get_user_model()

PASSWORD = "Secret123"

SHIPPING_ADDRESS = {
    "full_name": "Asha Menon",
    "address_line1": "14 Lake View Road",
    "city": "Kochi",
    "state": "Kerala",
    "postal_code": "682001",
    "phone": "9876543210",
}


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def user():
    return User.objects.create_user(
        email="asha@example.com",
        password=PASSWORD,
        name="Asha Menon",
        phone="9876543210",
    )


@pytest.fixture()
def other_user():
    return User.objects.create_user(
        email="vikram@example.com", password=PASSWORD, name="Vikram Das"
    )


@pytest.fixture()
def admin_user():
    return User.objects.create_superuser(
        email="admin@example.com", password=PASSWORD, name="Shop Admin"
    )


def _bearer_client(account) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_tokens(account)['token']}")
    return client


@pytest.fixture()
def user_client(user):
    """APIClient authenticated with a real bearer token for ``user``."""
    return _bearer_client(user)


@pytest.fixture()
def other_client(other_user):
    return _bearer_client(other_user)


@pytest.fixture()
def admin_client(admin_user):
    return _bearer_client(admin_user)


@pytest.fixture()
def user_caller(user):
    return Caller(user_id=user.id, role=UserRole.USER, email=user.email, name=user.name)


@pytest.fixture()
def other_caller(other_user):
    return Caller(user_id=other_user.id, role=UserRole.USER, email=other_user.email)


@pytest.fixture()
def admin_caller(admin_user):
    return Caller(user_id=admin_user.id, role=UserRole.ADMIN, email=admin_user.email)


@pytest.fixture()
def silk_saree():
    return Product.objects.create(
        name="Kanjivaram Silk Saree",
        description="Handwoven silk",
        category="sarees",
        price=Decimal("200.00"),
        stock=5,
        delivery_charges_applicable=False,
    )


@pytest.fixture()
def cotton_dupatta():
    return Product.objects.create(
        name="Cotton Dupatta",
        description="Block printed cotton",
        category="dupattas",
        price=Decimal("499.50"),
        stock=10,
        delivery_charges=Decimal("50.00"),
    )


@pytest.fixture()
def shipping_address():
    return dict(SHIPPING_ADDRESS)

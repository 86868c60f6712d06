import pytest
from decimal import Decimal
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.designs.models import ReceiptTemplate
from apps.menus.models import MenuItem
from apps.receipts.models import Receipt

User = get_user_model()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def receipt_owner(db):
    """Create and return the user issuing receipts."""
    return User.objects.create_user(
        username='cashier',
        email='cashier@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def other_user(db):
    """Create and return an unrelated user."""
    return User.objects.create_user(
        username='outsider',
        email='outsider@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def owner_client(api_client, receipt_owner):
    """Return API client authenticated as the receipt owner."""
    refresh = RefreshToken.for_user(receipt_owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(receipt_owner, other_user):
    """Return API client authenticated as the unrelated user."""
    client = APIClient()
    refresh = RefreshToken.for_user(other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def template(db, receipt_owner):
    """Template with tax and service charge enabled by default."""
    return ReceiptTemplate.objects.create(
        name='Cafe',
        business_name='Corner Cafe',
        business_address='1 Main Street\nSpringfield',
        created_by=receipt_owner,
        default_tax_rate=Decimal('8.5'),
        default_service_charge_rate=Decimal('5.0'),
        enable_tax_by_default=True,
        enable_service_charge_by_default=True,
        show_currency_symbol=True,
    )


@pytest.fixture
def menu_item(db, template):
    return MenuItem.objects.create(
        template=template,
        name='Espresso',
        price=Decimal('3.50'),
        category='Coffee',
    )


@pytest.fixture
def items_payload():
    return [
        {'description': 'Latte', 'quantity': 2, 'unit_price': '25.00'},
        {'description': 'Bagel', 'quantity': 1, 'unit_price': '15.00'},
    ]


@pytest.fixture
def receipt(db, receipt_owner, template):
    """Private receipt: 2 x 25.00 + 1 x 15.00 with tax 8.5% and service 5%."""
    return Receipt.objects.create(
        created_by=receipt_owner,
        template=template,
        items=[
            {'id': 'a', 'description': 'Latte', 'quantity': 2, 'unit_price': '25.00'},
            {'id': 'b', 'description': 'Bagel', 'quantity': 1, 'unit_price': '15.00'},
        ],
        tax_enabled=True,
        tax_rate=Decimal('8.5'),
        service_charge_enabled=True,
        service_charge_rate=Decimal('5.0'),
    )


@pytest.fixture
def public_receipt(db, receipt_owner):
    return Receipt.objects.create(
        created_by=receipt_owner,
        items=[{'id': 'a', 'description': 'Tea', 'quantity': 1, 'unit_price': '4.00'}],
        is_public=True,
    )

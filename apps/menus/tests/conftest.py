import pytest
from decimal import Decimal
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.designs.models import ReceiptTemplate
from apps.menus.models import MenuItem

User = get_user_model()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return the template owner."""
    return User.objects.create_user(
        username='owner',
        email='owner@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        username='guest',
        email='guest@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as the template owner."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(other_user):
    """Return API client authenticated as other user."""
    client = APIClient()
    refresh = RefreshToken.for_user(other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def template(db, user):
    """Private template owned by ``user``."""
    return ReceiptTemplate.objects.create(name='Cafe', business_name='Corner Cafe', created_by=user)


@pytest.fixture
def public_template(db, user):
    return ReceiptTemplate.objects.create(
        name='Public Cafe',
        business_name='Open Cafe',
        created_by=user,
        is_public=True,
    )


@pytest.fixture
def menu(db, template):
    """Three items: two coffees and an uncategorized inactive one."""
    return [
        MenuItem.objects.create(
            template=template, name='Espresso', price=Decimal('3.00'), category='Coffee', sort_order=0
        ),
        MenuItem.objects.create(
            template=template, name='Flat White', description='Double shot with milk',
            price=Decimal('4.20'), category='Coffee', sort_order=1
        ),
        MenuItem.objects.create(
            template=template, name='Day-old Scone', price=Decimal('1.00'), is_active=False, sort_order=2
        ),
    ]

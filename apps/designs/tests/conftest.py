import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.designs.models import ReceiptTemplate

User = get_user_model()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        username='designer',
        email='designer@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        username='otherdesigner',
        email='other@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as test user."""
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
    return ReceiptTemplate.objects.create(
        name='Bakery',
        business_name='Morning Bakery',
        created_by=user,
    )


@pytest.fixture
def public_template(db, user):
    return ReceiptTemplate.objects.create(
        name='Market Stall',
        business_name='Saturday Market',
        created_by=user,
        is_public=True,
    )

import pytest

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.collections.models import Collection

User = get_user_model()


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
    return User.objects.create_user(username="owner", password="testpass123")


@pytest.fixture()
def other_user():
    return User.objects.create_user(username="intruder", password="testpass123")


@pytest.fixture()
def auth_client(user):
    """APIClient force-authenticated as ``user``."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def other_client(other_user):
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client


@pytest.fixture()
def active_collection():
    return Collection.objects.create(name="Summer", slug="summer")


@pytest.fixture()
def inactive_collection():
    return Collection.objects.create(name="Archive", slug="archive", is_active=False)

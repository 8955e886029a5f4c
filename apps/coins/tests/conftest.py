import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def parent(db):
    """Group creator."""
    return User.objects.create_user(
        email='parent@example.com',
        password='TestPass123!',
        full_name='Parent',
    )


@pytest.fixture
def child(db, parent):
    """Dependent of `parent`."""
    return User.objects.create_user(
        email='child@example.com',
        password='TestPass123!',
        full_name='Child',
        is_dependent=True,
        master_user=parent,
    )


@pytest.fixture
def outsider(db):
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        full_name='Outsider',
    )


@pytest.fixture
def group(db, parent, child):
    """Household group with parent and child as members."""
    group = Group.objects.create(name='Household', created_by=parent)
    GroupMembership.objects.create(user=parent, group=group)
    GroupMembership.objects.create(user=child, group=group)
    return group


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def parent_client(parent):
    return _client_for(parent)


@pytest.fixture
def child_client(child):
    return _client_for(child)


@pytest.fixture
def outsider_client(outsider):
    return _client_for(outsider)

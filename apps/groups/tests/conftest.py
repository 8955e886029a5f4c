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
def creator(db):
    """Group creator."""
    return User.objects.create_user(
        email='creator@example.com',
        password='TestPass123!',
        full_name='Group Creator',
    )


@pytest.fixture
def member(db):
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        full_name='Group Member',
    )


@pytest.fixture
def other_user(db):
    """User not in any group."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        full_name='Other User',
    )


@pytest.fixture
def group(db, creator, member):
    """Group with the creator and one regular member."""
    group = Group.objects.create(
        name='Household',
        description='Chores and treats',
        created_by=creator,
    )
    GroupMembership.objects.create(user=creator, group=group)
    GroupMembership.objects.create(user=member, group=group)
    return group


@pytest.fixture
def dependent(db, creator, group):
    """Dependent of the creator, already in the group."""
    user = User.objects.create_user(
        email='kid@example.com',
        password='TestPass123!',
        full_name='Kid',
        is_dependent=True,
        master_user=creator,
    )
    GroupMembership.objects.create(user=user, group=group)
    return user


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def creator_client(creator):
    return _client_for(creator)


@pytest.fixture
def member_client(member):
    return _client_for(member)


@pytest.fixture
def other_client(other_user):
    return _client_for(other_user)

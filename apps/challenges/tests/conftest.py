import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.challenges.models import Challenge
from apps.groups.models import Group, GroupMembership


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def creator(db):
    """Group and challenge creator (U2 in the household scenario)."""
    return User.objects.create_user(
        email='creator@example.com',
        password='TestPass123!',
        full_name='Creator',
    )


@pytest.fixture
def member(db):
    """Regular group member (U1)."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        full_name='Member',
    )


@pytest.fixture
def dependent(db, creator):
    """Dependent of the creator."""
    return User.objects.create_user(
        email='kid@example.com',
        password='TestPass123!',
        full_name='Kid',
        is_dependent=True,
        master_user=creator,
    )


@pytest.fixture
def outsider(db):
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        full_name='Outsider',
    )


@pytest.fixture
def group(db, creator, member, dependent):
    group = Group.objects.create(name='Household', created_by=creator)
    for user in (creator, member, dependent):
        GroupMembership.objects.create(user=user, group=group)
    return group


@pytest.fixture
def challenge(db, group, creator, member):
    """Challenge worth 50 coins assigned to `member`."""
    challenge = Challenge.objects.create(
        group=group,
        created_by=creator,
        name='Wash the dishes',
        coin_value=50,
    )
    challenge.assigned_users.add(member)
    return challenge


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
def outsider_client(outsider):
    return _client_for(outsider)

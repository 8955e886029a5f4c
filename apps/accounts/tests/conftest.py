import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        full_name='Test User',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        full_name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        email='otheruser@example.com',
        password='OtherPass123!',
        full_name='Other User',
    )


@pytest.fixture
def dependent(db, user):
    """Create a dependent account managed by `user`."""
    return User.objects.create_user(
        email='kid@example.com',
        password='KidPass123!',
        full_name='Kid User',
        is_dependent=True,
        master_user=user,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def user_with_reset_token(db):
    """Create a user with a password reset token."""
    user = User.objects.create_user(
        email='resetuser@example.com',
        password='OldPass123!',
        full_name='Reset User',
    )
    user.verification_token = 'valid-reset-token-12345'
    user.save()
    return user


@pytest.fixture
def media_root(settings, tmp_path):
    """Store uploaded files in a temporary directory."""
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path

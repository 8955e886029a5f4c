from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema

from .serializers import (
    UserSerializer,
    UserRegistrationSerializer,
    UserLoginSerializer,
    DependentLoginSerializer,
    PasswordResetRequestSerializer,
    PasswordResetConfirmSerializer,
    ProfilePhotoSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    authenticate_dependent,
    request_password_reset,
    confirm_password_reset,
    upload_profile_photo,
    get_user_profile,
    UserNotFoundError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    code = serializers.CharField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(help_text="Refresh token to discard")


class PhotoResponseSerializer(serializers.Serializer):
    profile_photo_url = serializers.CharField()


class ProfileResponseSerializer(serializers.Serializer):
    user = UserSerializer()
    created_challenges = serializers.ListField(child=serializers.DictField())
    completed_challenges = serializers.ListField(child=serializers.DictField())
    redeemed_rewards = serializers.ListField(child=serializers.DictField())


def _auth_response(user, message, status_code=status.HTTP_200_OK):
    refresh = RefreshToken.for_user(user)
    return Response({
        'message': message,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    }, status=status_code)


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Register a new user account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = register_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
        full_name=serializer.validated_data['full_name'],
    )

    return _auth_response(user, 'Registration successful', status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
    )

    return _auth_response(user, 'Login successful')


@extend_schema(
    request=DependentLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Sign in as a dependent using the master user's credentials.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def dependent_login(request):
    """Issue tokens for a dependent account."""
    serializer = DependentLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    dependent = authenticate_dependent(**serializer.validated_data)

    return _auth_response(dependent, 'Login successful')


@extend_schema(
    request=LogoutRequestSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Logout. The refresh token is checked and then discarded by the client.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Logout the current user."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            RefreshToken(refresh_token)
        except TokenError:
            return Response({
                'error': 'Invalid token'
            }, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Logout successful'
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=PasswordResetRequestSerializer,
    responses={200: MessageResponseSerializer},
    description="Request a password reset email. Always returns success.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def password_reset(request):
    """Request password reset email."""
    serializer = PasswordResetRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        request_password_reset(email=serializer.validated_data['email'])
    except UserNotFoundError:
        # Don't reveal whether the email exists
        pass

    return Response({
        'message': 'If the account exists, a password reset email has been sent'
    })


@extend_schema(
    request=PasswordResetConfirmSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Confirm password reset with token and set new password.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def password_reset_confirm(request):
    """Confirm password reset with token."""
    serializer = PasswordResetConfirmSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    confirm_password_reset(
        token=serializer.validated_data['token'],
        new_password=serializer.validated_data['new_password'],
    )

    return Response({
        'message': 'Password reset successful'
    })


@extend_schema(
    request={'multipart/form-data': ProfilePhotoSerializer},
    responses={
        200: PhotoResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Upload a JPG or PNG profile photo (max 2MB).",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def upload_photo(request):
    """Upload a profile photo for the current user."""
    url = upload_profile_photo(user_id=request.user.id, photo=request.FILES.get('photo'))
    return Response({'profile_photo_url': url})


@extend_schema(
    responses={
        200: ProfileResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Profile overview of the current user or one of their dependents.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_profile(request, pk):
    """Profile with created challenges, completed challenges and redeemed rewards."""
    profile = get_user_profile(user_id=pk, requested_by=request.user)

    return Response({
        'user': UserSerializer(profile['user']).data,
        'created_challenges': [
            {'id': str(c.id), 'name': c.name, 'coin_value': c.coin_value}
            for c in profile['created_challenges']
        ],
        'completed_challenges': [
            {
                'id': str(c.challenge_id),
                'name': c.challenge.name,
                'completed_at': c.completed_at,
            }
            for c in profile['completed_challenges']
        ],
        'redeemed_rewards': [
            {
                'id': str(t.reward_id),
                'description': t.reward.description,
                'redeemed_at': t.timestamp,
            }
            for t in profile['redeemed_rewards']
        ],
    })

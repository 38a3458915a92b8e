from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from config.responses import error_response
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    issue_token_pair,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
)


# Response serializers for API documentation
class AuthResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    token = serializers.CharField(help_text="Access token")
    refresh = serializers.CharField(help_text="Refresh token")
    user = UserSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()


def _auth_response(user, status_code):
    """Issue a JWT pair for ``user`` in the API envelope."""
    tokens = issue_token_pair(user=user)
    return Response({
        'success': True,
        'token': tokens.access,
        'refresh': tokens.refresh,
        'user': UserSerializer(user).data,
    }, status=status_code)


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new user account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def signup(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = register_user(**serializer.validated_data)
    except UserRegistrationError as e:
        return error_response(e, status.HTTP_400_BAD_REQUEST)

    return _auth_response(user, status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(**serializer.validated_data)
    except (InvalidCredentialsError, InactiveAccountError) as e:
        return error_response(e, status.HTTP_401_UNAUTHORIZED)

    return _auth_response(user, status.HTTP_200_OK)

"""Login and token issuance."""

import logging
from dataclasses import dataclass

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()
logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


@dataclass(frozen=True)
class TokenPair:
    access: str
    refresh: str


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check an email/password pair and record the login.

    The email lookup is case-insensitive. Unknown emails and wrong
    passwords produce the same error. The row is locked while
    ``last_login`` is written.

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
    """
    user = (
        User.objects
        .select_for_update()
        .filter(email__iexact=(email or '').strip())
        .first()
    )
    if user is None or not user.check_password(password):
        logger.info("Failed login attempt")
        raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    logger.info("User %s logged in", user.pk)
    return user


def issue_token_pair(*, user: User) -> TokenPair:
    """Create a JWT access/refresh pair for ``user``."""
    refresh = RefreshToken.for_user(user)
    return TokenPair(access=str(refresh.access_token), refresh=str(refresh))

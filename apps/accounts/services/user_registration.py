"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


def register_user(
    *,
    email: str,
    password: str,
    name: str
) -> User:
    """
    Register a new user.

    Args:
        email: User's email address (login name, unique)
        password: User's password (will be hashed)
        name: Name shown next to the user's reviews

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is already registered
    """
    email = User.objects.normalize_email(email)

    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("Email already registered")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                name=name,
            )
    except IntegrityError:
        # Concurrent signup with the same email won the race
        raise UserRegistrationError("Email already registered")

    logger.info("Registered user %s", user.pk)
    return user

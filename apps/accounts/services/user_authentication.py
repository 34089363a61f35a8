"""Owner authentication and profile service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('display_name', 'library_name')


@transaction.atomic
def authenticate_owner(*, email: str, password: str) -> User:
    """
    Authenticate a library owner with email and password.

    Args:
        email: Owner's email
        password: Owner's password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
    """
    try:
        user = User.objects.select_for_update().get(email__iexact=email)
    except User.DoesNotExist:
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    logger.info("Owner %s logged in", user.email)
    return user


def update_owner_profile(*, user: User, **changes) -> User:
    """Update display name and library name."""
    update_fields = [field for field in PROFILE_FIELDS if field in changes]
    for field in update_fields:
        setattr(user, field, changes[field])
    if update_fields:
        user.save(update_fields=update_fields)
    return user

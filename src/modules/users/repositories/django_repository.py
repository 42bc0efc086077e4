"""User directory backed by ``django.contrib.auth``'s user model."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

import structlog
from django.contrib.auth import get_user_model
from django.contrib.auth.base_user import AbstractBaseUser
from django.core.exceptions import ValidationError

from modules.users.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserDjangoRepository(IUserRepository):
    """Concrete user directory using the configured ``AUTH_USER_MODEL``."""

    def get_by_id(self, id: int | str | UUID) -> Optional[AbstractBaseUser]:
        """Returns ``None`` for non-existent or malformed IDs."""
        User = get_user_model()
        try:
            user = User.objects.filter(pk=id).first()
        except (ValueError, TypeError, ValidationError):
            user = None
        if user is None:
            logger.info("user.lookup_missed", user_id=str(id))
        return user

"""User directory interface.

Users are owned by the authentication system; the order module only
needs to resolve an id and read the ``is_active`` flag.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional
from uuid import UUID


class IUserRepository(ABC):
    """Read-only contract over the user directory."""

    @abstractmethod
    def get_by_id(self, id: int | str | UUID) -> Optional[Any]:
        """Return the user (exposing ``id`` and ``is_active``) or ``None``."""

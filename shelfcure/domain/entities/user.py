"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime

ROLE_ADMIN = "admin"
ROLE_STORE_OWNER = "store_owner"
ROLE_STORE_MANAGER = "store_manager"


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    store_id: int | None
    name: str
    email: str
    password: str
    role: str
    is_active: bool
    last_login: datetime | None
    created_at: datetime | None

    def has_role(self, role: str) -> bool:
        """Return ``True`` when the user's role matches ``role``."""

        return self.role.lower() == role.lower()

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role(ROLE_ADMIN)


__all__ = ["User", "ROLE_ADMIN", "ROLE_STORE_OWNER", "ROLE_STORE_MANAGER"]

"""
User entity and role/permission model.

Roles are plain data: a single users table carries a role tag and a set
of permission names. There is no per-role class hierarchy.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Role(str, Enum):
    """User roles stored in the users.role column."""

    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


ADMIN_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})


@dataclass
class User:
    """
    User record as seen by the domain.

    The verification core only ever mutates email_verified_at,
    password_hash and remember_token, and only through the user store.
    """

    id: int
    username: str
    email: str
    password_hash: str
    role: Role = Role.USER
    permissions: frozenset[str] = field(default_factory=frozenset)
    email_verified_at: datetime | None = None
    remember_token: str | None = None
    name: str | None = None
    created_at: datetime | None = None

    def has_verified_email(self) -> bool:
        return self.email_verified_at is not None

    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    def has_permission(self, permission: str) -> bool:
        """Super admins hold every permission implicitly."""
        if self.is_super_admin():
            return True
        return permission in self.permissions

    def has_any_permission(self, permissions: list[str]) -> bool:
        if self.is_super_admin():
            return True
        return not self.permissions.isdisjoint(permissions)

    def has_all_permissions(self, permissions: list[str]) -> bool:
        if self.is_super_admin():
            return True
        return self.permissions.issuperset(permissions)

    def snapshot(self) -> dict[str, Any]:
        """Public view of the user carried in success outcomes."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "email_verified_at": (
                self.email_verified_at.isoformat() if self.email_verified_at else None
            ),
        }

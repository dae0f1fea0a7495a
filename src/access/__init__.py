"""Access control — иерархия ролей ADMIN/GUARDIAN/DATA/OPS."""

from .registry import (
    DEFAULT_ROLE_ADMINS,
    AccessControlRegistry,
    Role,
)

__all__ = [
    "AccessControlRegistry",
    "Role",
    "DEFAULT_ROLE_ADMINS",
]

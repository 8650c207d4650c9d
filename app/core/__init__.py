"""Core app configuration, database and access control."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.permissions import Permission, Role, has_permission

__all__ = ["get_settings", "settings", "get_db", "Permission", "Role", "has_permission"]

"""
Audit Trail Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import AuditEventType, EventKind

# Export all entities
from .user import User
from .member import Member
from .user_group import UserGroup
from .entity import Entity
from .audit_entry import AuditEntry
from .audit_log import AuditLog

__all__ = [
    # Enums
    "AuditEventType",
    "EventKind",
    # Entities
    "User",
    "Member",
    "UserGroup",
    "Entity",
    "AuditEntry",
    "AuditLog",
]

"""
Event Payloads

Arguments carried by the events the identity, user and member services raise.
Save payloads carry an explicit list of changed field names per entity; the
audit pipeline renders that list and never computes dirtiness itself.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

EntityT = TypeVar("EntityT")


class Principal(BaseModel):
    """Authenticated identity attached to a request"""

    model_config = ConfigDict(frozen=True)

    user_id: int


class RequestContext(BaseModel):
    """
    Ambient request state captured once per request by the web layer.

    principal is None when the action runs without an authenticated user
    (background jobs, startup, anonymous calls).
    """

    model_config = ConfigDict(frozen=True)

    principal: Optional[Principal] = None
    ip_address: Optional[str] = None


class IdentityAuditEventArgs(BaseModel):
    """
    Authentication event payload.

    These events originate outside a web request and carry their own actor
    and caller address. A negative performing_user_id means the actor is not
    known.
    """

    model_config = ConfigDict(frozen=True)

    performing_user_id: int
    affected_user_id: int = 0
    ip_address: str = ""


class DirtyEntity(BaseModel, Generic[EntityT]):
    """Saved entity with the names of the fields changed since it was loaded"""

    model_config = ConfigDict(frozen=True)

    entity: EntityT
    dirty_properties: List[str] = Field(default_factory=list)

    def was_dirty(self, name: str) -> bool:
        return name in self.dirty_properties


class SaveEventArgs(BaseModel, Generic[EntityT]):
    model_config = ConfigDict(frozen=True)

    saved_entities: List[DirtyEntity[EntityT]]


class DeleteEventArgs(BaseModel, Generic[EntityT]):
    model_config = ConfigDict(frozen=True)

    deleted_entities: List[EntityT]


class RolesEventArgs(BaseModel):
    """Roles assigned to or removed from a batch of members"""

    model_config = ConfigDict(frozen=True)

    member_ids: List[int]
    roles: List[str]


class EntityPermission(BaseModel):
    """Permissions granted to a user group on one entity"""

    model_config = ConfigDict(frozen=True)

    user_group_id: int
    entity_id: int
    assigned_permissions: List[str] = Field(default_factory=list)


class PermissionsEventArgs(BaseModel):
    model_config = ConfigDict(frozen=True)

    saved_entities: List[EntityPermission]

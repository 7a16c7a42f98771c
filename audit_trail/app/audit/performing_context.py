"""
Performing Context Resolution

Works out who performed an action and where the call came from.
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict

from audit_trail.app.repositories.user_repository import IUserRepository
from audit_trail.domain.errors import ConsistencyViolation
from audit_trail.domain.events import Principal

logger = logging.getLogger(__name__)

SYSTEM_USER_ID = 0
SYSTEM_USER_NAME = "SYSTEM"


class Actor(BaseModel):
    """Identity an audit entry is attributed to"""

    model_config = ConfigDict(frozen=True)

    user_id: int
    name: str
    email: str = ""


SYSTEM_ACTOR = Actor(user_id=SYSTEM_USER_ID, name=SYSTEM_USER_NAME, email="")


class PerformingContextResolver:
    """
    Resolves the acting identity and the caller address.

    Business Rules:
    - No principal resolves to the SYSTEM pseudo-identity and never fails
    - A principal or payload id that does not match a stored user is a
      consistency failure between identity layer and user store
    - Caller addresses starting with "unknown" (any case) are treated as empty
    """

    def __init__(self, users: IUserRepository, system_actor: Actor = SYSTEM_ACTOR):
        self.users = users
        self.system_actor = system_actor

    async def resolve_actor(self, principal: Optional[Principal]) -> Actor:
        """
        Resolve the actor from the ambient identity.

        Args:
            principal: Authenticated identity of the request, or None

        Returns:
            The stored user as an Actor, or the system actor when no principal

        Raises:
            ConsistencyViolation: principal references a user that does not exist
        """
        if principal is None:
            return self.system_actor
        return await self._lookup(principal.user_id)

    async def resolve_performer(self, user_id: int) -> Actor:
        """
        Resolve an actor id supplied directly by an event payload.

        Id 0 is the system pseudo-identity and is not looked up.
        """
        if user_id == SYSTEM_USER_ID:
            return self.system_actor
        return await self._lookup(user_id)

    @staticmethod
    def resolve_caller_address(ip_address: Optional[str]) -> str:
        """Normalize the request's client address, empty when unknown"""
        if not ip_address:
            return ""
        if ip_address.lower().startswith("unknown"):
            return ""
        return ip_address

    async def _lookup(self, user_id: int) -> Actor:
        user = await self.users.get_by_id(user_id)
        if user is None:
            logger.warning(f"Performing user {user_id} not found in user store")
            raise ConsistencyViolation(f"No user found with id {user_id}")
        return Actor(user_id=user.id, name=user.name, email=user.email or "")


class PerformingContext(BaseModel):
    """Actor plus caller address, resolved once per event invocation"""

    model_config = ConfigDict(frozen=True)

    actor: Actor
    ip_address: str = ""

from abc import ABC, abstractmethod
from typing import Optional

from audit_trail.domain.entities import UserGroup


class IUserGroupRepository(ABC):
    """UserGroup repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, user_group_id: int) -> Optional[UserGroup]:
        """Get user group by ID"""
        pass

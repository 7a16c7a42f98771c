from abc import ABC, abstractmethod
from typing import Optional

from audit_trail.domain.entities import Entity


class IEntityRepository(ABC):
    """Entity repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, entity_id: int) -> Optional[Entity]:
        """Get entity by ID"""
        pass

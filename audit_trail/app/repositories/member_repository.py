from abc import ABC, abstractmethod
from typing import Dict, Iterable

from audit_trail.domain.entities import Member


class IMemberRepository(ABC):
    """Member repository interface - application layer"""

    @abstractmethod
    async def get_all_by_ids(self, member_ids: Iterable[int]) -> Dict[int, Member]:
        """
        Get members by ID in a single lookup.

        Returns:
            Mapping of member id to Member. Ids with no stored member are
            absent from the mapping.
        """
        pass

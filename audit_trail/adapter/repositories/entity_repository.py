from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from audit_trail.app.repositories.entity_repository import IEntityRepository
from audit_trail.domain.entities import Entity


class EntityRepository(IEntityRepository):
    """Entity repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, entity_id: int) -> Optional[Entity]:
        """Get entity by ID"""
        stmt = select(Entity).where(Entity.id == entity_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

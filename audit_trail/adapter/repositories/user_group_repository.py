from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from audit_trail.app.repositories.user_group_repository import IUserGroupRepository
from audit_trail.domain.entities import UserGroup


class UserGroupRepository(IUserGroupRepository):
    """UserGroup repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_group_id: int) -> Optional[UserGroup]:
        """Get user group by ID"""
        stmt = select(UserGroup).where(UserGroup.id == user_group_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

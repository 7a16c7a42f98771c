from typing import Dict, Iterable

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from audit_trail.app.repositories.member_repository import IMemberRepository
from audit_trail.domain.entities import Member


class MemberRepository(IMemberRepository):
    """Member repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all_by_ids(self, member_ids: Iterable[int]) -> Dict[int, Member]:
        """Get members by ID with one query"""
        ids = set(member_ids)
        if not ids:
            return {}
        stmt = select(Member).where(col(Member.id).in_(ids))
        result = await self.session.exec(stmt)
        return {member.id: member for member in result.all()}

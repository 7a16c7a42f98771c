from typing import Callable

from sqlmodel.ext.asyncio.session import AsyncSession

from audit_trail.adapter.repositories.audit_entry_repository import AuditEntryRepository
from audit_trail.adapter.repositories.entity_repository import EntityRepository
from audit_trail.adapter.repositories.member_repository import MemberRepository
from audit_trail.adapter.repositories.user_group_repository import UserGroupRepository
from audit_trail.adapter.repositories.user_repository import UserRepository
from audit_trail.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.members = MemberRepository(self.session)
        self.user_groups = UserGroupRepository(self.session)
        self.entities = EntityRepository(self.session)
        self.audit_entries = AuditEntryRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()


class SessionScopedUnitOfWork(SqlAlchemyUnitOfWork):
    """UnitOfWork that opens its own session and closes it on exit"""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory
        self.session = None

    async def __aenter__(self):
        self.session = self.session_factory()
        return await super().__aenter__()

    async def __aexit__(self, *args):
        try:
            await super().__aexit__(*args)
        finally:
            await self.session.close()

from abc import ABC, abstractmethod

from audit_trail.app.repositories.audit_entry_repository import IAuditEntryRepository
from audit_trail.app.repositories.entity_repository import IEntityRepository
from audit_trail.app.repositories.member_repository import IMemberRepository
from audit_trail.app.repositories.user_group_repository import IUserGroupRepository
from audit_trail.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    members: IMemberRepository
    user_groups: IUserGroupRepository
    entities: IEntityRepository
    audit_entries: IAuditEntryRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

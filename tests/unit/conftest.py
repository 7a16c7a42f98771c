import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Mock repositories
    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock(return_value=None)

    uow.members = MagicMock()
    uow.members.get_all_by_ids = AsyncMock(return_value={})

    uow.user_groups = MagicMock()
    uow.user_groups.get_by_id = AsyncMock(return_value=None)

    uow.entities = MagicMock()
    uow.entities.get_by_id = AsyncMock(return_value=None)

    uow.audit_entries = MagicMock()
    uow.audit_entries.append = AsyncMock(side_effect=lambda entry: entry)

    return uow

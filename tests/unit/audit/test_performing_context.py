import pytest

from audit_trail.app.audit.performing_context import SYSTEM_ACTOR, PerformingContextResolver
from audit_trail.domain.entities import User
from audit_trail.domain.errors import ConsistencyViolation
from audit_trail.domain.events import Principal


@pytest.fixture
def resolver(mock_uow):
    return PerformingContextResolver(mock_uow.users)


@pytest.mark.asyncio
async def test_no_principal_resolves_to_system(resolver, mock_uow):
    actor = await resolver.resolve_actor(None)

    assert actor == SYSTEM_ACTOR
    assert actor.user_id == 0
    assert actor.name == "SYSTEM"
    assert actor.email == ""
    mock_uow.users.get_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_principal_resolves_stored_user(resolver, mock_uow):
    mock_uow.users.get_by_id.return_value = User(id=12, name="Jane", email="jane@acme.com")

    actor = await resolver.resolve_actor(Principal(user_id=12))

    assert actor.user_id == 12
    assert actor.name == "Jane"
    assert actor.email == "jane@acme.com"
    mock_uow.users.get_by_id.assert_awaited_once_with(12)


@pytest.mark.asyncio
async def test_principal_without_stored_user_is_consistency_violation(resolver, mock_uow):
    mock_uow.users.get_by_id.return_value = None

    with pytest.raises(ConsistencyViolation) as exc_info:
        await resolver.resolve_actor(Principal(user_id=99))

    assert exc_info.value.code == "CONSISTENCY_VIOLATION"
    assert "99" in exc_info.value.message


@pytest.mark.asyncio
async def test_payload_performer_zero_is_system(resolver, mock_uow):
    actor = await resolver.resolve_performer(0)

    assert actor == SYSTEM_ACTOR
    mock_uow.users.get_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_payload_performer_is_looked_up(resolver, mock_uow):
    mock_uow.users.get_by_id.return_value = User(id=3, name="Ops", email="")

    actor = await resolver.resolve_performer(3)

    assert actor.user_id == 3
    assert actor.email == ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("unknown", ""),
        ("UNKNOWN", ""),
        ("Unknown:1234", ""),
        ("unknown-proxy", ""),
        (None, ""),
        ("", ""),
        ("192.168.1.20", "192.168.1.20"),
        ("::1", "::1"),
    ],
)
def test_caller_address_normalization(raw, expected):
    assert PerformingContextResolver.resolve_caller_address(raw) == expected

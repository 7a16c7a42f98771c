"""
Event Source

Subscribable hooks that a service raises lifecycle events on. Handlers are
awaited inline, in subscription order, by whoever raises the event; errors
from a handler propagate to the raiser.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Iterable, List, Optional

from audit_trail.domain.entities import EventKind
from audit_trail.domain.events import RequestContext

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any, Optional[RequestContext]], Awaitable[None]]


class EventSource:
    """
    Named set of event hooks exposed by one service.

    Business Rules:
    - Only the kinds the source declares can be subscribed to or raised
    - Raising a kind with no subscribers is a no-op
    - No queueing: raise_event returns once every handler has returned
    """

    def __init__(self, name: str, kinds: Iterable[EventKind]):
        self.name = name
        self.kinds: FrozenSet[EventKind] = frozenset(kinds)
        self._handlers: Dict[EventKind, List[EventHandler]] = {kind: [] for kind in self.kinds}

    def subscribe(self, kind: EventKind, handler: EventHandler) -> None:
        """Attach a handler to an event kind"""
        self._check_kind(kind)
        self._handlers[kind].append(handler)
        logger.debug(f"Subscribed {getattr(handler, '__name__', handler)} to {self.name}.{kind.value}")

    def handlers(self, kind: EventKind) -> List[EventHandler]:
        """Handlers currently attached to an event kind"""
        self._check_kind(kind)
        return list(self._handlers[kind])

    async def raise_event(
        self, kind: EventKind, args: Any, context: Optional[RequestContext] = None
    ) -> None:
        """
        Raise an event and await every subscribed handler.

        Args:
            kind: Event kind being raised
            args: Event payload
            context: Ambient request state of the raiser, None outside a request
        """
        for handler in self.handlers(kind):
            await handler(args, context)

    def _check_kind(self, kind: EventKind) -> None:
        if kind not in self.kinds:
            raise ValueError(f"Event source '{self.name}' does not raise {kind.value}")


def identity_event_source() -> EventSource:
    """Authentication events, including the reserved ones"""
    return EventSource(
        "identity",
        [
            EventKind.login_success,
            EventKind.logout_success,
            EventKind.login_failed,
            EventKind.password_changed,
            EventKind.password_reset,
            EventKind.forgot_password_requested,
            EventKind.forgot_password_changed,
            EventKind.account_locked,
            EventKind.account_unlocked,
            EventKind.login_requires_verification,
            EventKind.reset_access_failed_count,
        ],
    )


def user_event_source() -> EventSource:
    """User and user group administration events"""
    return EventSource(
        "users",
        [
            EventKind.user_saved,
            EventKind.user_deleted,
            EventKind.user_group_saved,
            EventKind.user_group_permissions_assigned,
        ],
    )


def member_event_source() -> EventSource:
    """Member administration events"""
    return EventSource(
        "members",
        [
            EventKind.member_saved,
            EventKind.member_deleted,
            EventKind.member_roles_assigned,
            EventKind.member_roles_removed,
        ],
    )

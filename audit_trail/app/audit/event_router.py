"""
Audit Event Router

Subscribes to the identity, user and member event sources and turns every
raised event into audit entries appended to the sink.
"""

import logging
from enum import Enum
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple

from audit_trail.app.events.event_source import EventHandler, EventSource
from audit_trail.app.services.unit_of_work import UnitOfWork
from audit_trail.domain.entities import AuditEntry, EventKind, Member, User, UserGroup
from audit_trail.domain.errors import ConsistencyViolation, SinkFailure
from audit_trail.domain.events import (
    DeleteEventArgs,
    IdentityAuditEventArgs,
    PermissionsEventArgs,
    RequestContext,
    RolesEventArgs,
    SaveEventArgs,
)

from . import entry_formatter as fmt
from .performing_context import SYSTEM_ACTOR, Actor, PerformingContext, PerformingContextResolver

logger = logging.getLogger(__name__)

# Identity kinds where a negative performing user id means "do not audit"
SKIP_ON_NEGATIVE_PERFORMER = frozenset(
    {
        EventKind.login_failed,
        EventKind.password_changed,
        EventKind.password_reset,
        EventKind.forgot_password_requested,
    }
)


class RouterState(str, Enum):
    unregistered = "unregistered"
    registered = "registered"


class EventRouter:
    """
    Routes lifecycle events to the entry formatter and the audit sink.

    Business Rules:
    - Registered once per process; there is no unsubscribe path
    - Each invocation opens its own unit of work; nothing is shared between
      invocations
    - Lookups are batched once per invocation
    - ConsistencyViolation aborts the event before anything is appended
    - Sink failures are wrapped in SinkFailure and propagate to the raiser
    - Negative performers on failed-login and password events are skipped
    """

    def __init__(
        self,
        identity_events: EventSource,
        user_events: EventSource,
        member_events: EventSource,
        uow_factory: Callable[[], UnitOfWork],
        system_actor: Actor = SYSTEM_ACTOR,
    ):
        self.identity_events = identity_events
        self.user_events = user_events
        self.member_events = member_events
        self.uow_factory = uow_factory
        self.system_actor = system_actor
        self.state = RouterState.unregistered
        self._subscriptions: List[Tuple[EventSource, EventKind]] = []

    @property
    def is_registered(self) -> bool:
        return self.state == RouterState.registered

    @property
    def subscriptions(self) -> List[Tuple[EventSource, EventKind]]:
        """(source, kind) pairs this router has subscribed to"""
        return list(self._subscriptions)

    def register(self) -> None:
        """
        Subscribe one handler per audited event kind.

        Raises:
            RuntimeError: router is already registered
        """
        if self.is_registered:
            raise RuntimeError("Audit event router is already registered")

        wiring: Iterable[Tuple[EventSource, EventKind, EventHandler]] = [
            (self.identity_events, EventKind.forgot_password_requested, self.on_forgot_password_requested),
            (self.identity_events, EventKind.forgot_password_changed, self.on_forgot_password_changed),
            (self.identity_events, EventKind.login_failed, self.on_login_failed),
            (self.identity_events, EventKind.login_success, self.on_login_success),
            (self.identity_events, EventKind.logout_success, self.on_logout_success),
            (self.identity_events, EventKind.password_changed, self.on_password_changed),
            (self.identity_events, EventKind.password_reset, self.on_password_reset),
            (self.user_events, EventKind.user_group_saved, self.on_user_group_saved),
            (self.user_events, EventKind.user_saved, self.on_user_saved),
            (self.user_events, EventKind.user_deleted, self.on_user_deleted),
            (self.user_events, EventKind.user_group_permissions_assigned, self.on_permissions_assigned),
            (self.member_events, EventKind.member_saved, self.on_member_saved),
            (self.member_events, EventKind.member_deleted, self.on_member_deleted),
            (self.member_events, EventKind.member_roles_assigned, self.on_roles_assigned),
            (self.member_events, EventKind.member_roles_removed, self.on_roles_removed),
        ]
        for source, kind, handler in wiring:
            source.subscribe(kind, handler)
            self._subscriptions.append((source, kind))

        self.state = RouterState.registered
        logger.info(f"Audit event router registered {len(self._subscriptions)} handlers")

    # ========================================================================
    # Dispatch
    # ========================================================================

    async def _dispatch(
        self,
        build: Callable[[UnitOfWork, PerformingContextResolver], Awaitable[List[AuditEntry]]],
    ) -> List[AuditEntry]:
        """Resolve, format and append inside one unit of work"""
        async with self.uow_factory() as uow:
            resolver = PerformingContextResolver(uow.users, self.system_actor)
            entries = await build(uow, resolver)
            try:
                for entry in entries:
                    await uow.audit_entries.append(entry)
                await uow.commit()
            except Exception as exc:
                logger.error(f"Failed to append audit entries: {exc}")
                raise SinkFailure(f"Failed to append audit entries: {exc}") from exc

        for entry in entries:
            logger.debug(
                f"Audit: {entry.performing_user_id} - {entry.event_type.value} - {entry.affected_id}"
            )
        return entries

    async def _ambient_context(
        self, resolver: PerformingContextResolver, context: Optional[RequestContext]
    ) -> PerformingContext:
        context = context or RequestContext()
        actor = await resolver.resolve_actor(context.principal)
        return PerformingContext(
            actor=actor, ip_address=resolver.resolve_caller_address(context.ip_address)
        )

    async def _identity_dispatch(
        self,
        kind: EventKind,
        args: IdentityAuditEventArgs,
        build: Callable[[PerformingContext, Optional[User]], AuditEntry],
        with_affected_user: bool,
    ) -> List[AuditEntry]:
        if kind in SKIP_ON_NEGATIVE_PERFORMER and args.performing_user_id < 0:
            logger.debug(f"Skipping {kind.value} audit: no performing user")
            return []

        async def _build(uow: UnitOfWork, resolver: PerformingContextResolver) -> List[AuditEntry]:
            actor = await resolver.resolve_performer(args.performing_user_id)
            affected = None
            if with_affected_user:
                affected = await uow.users.get_by_id(args.affected_user_id)
                if affected is None:
                    logger.warning(f"Affected user {args.affected_user_id} not found for {kind.value}")
                    raise ConsistencyViolation(f"No user found with id {args.affected_user_id}")
            # Identity events carry their own address, used verbatim
            performing = PerformingContext(actor=actor, ip_address=args.ip_address or "")
            return [build(performing, affected)]

        return await self._dispatch(_build)

    # ========================================================================
    # Identity handlers
    # ========================================================================

    async def on_login_success(
        self, args: IdentityAuditEventArgs, context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        return await self._identity_dispatch(
            EventKind.login_success, args, lambda c, _: fmt.format_login_success(c), False
        )

    async def on_logout_success(
        self, args: IdentityAuditEventArgs, context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        return await self._identity_dispatch(
            EventKind.logout_success, args, lambda c, _: fmt.format_logout_success(c), False
        )

    async def on_login_failed(
        self, args: IdentityAuditEventArgs, context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        return await self._identity_dispatch(
            EventKind.login_failed, args, lambda c, _: fmt.format_login_failed(c), False
        )

    async def on_password_changed(
        self, args: IdentityAuditEventArgs, context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        return await self._identity_dispatch(
            EventKind.password_changed, args, fmt.format_password_changed, True
        )

    async def on_password_reset(
        self, args: IdentityAuditEventArgs, context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        return await self._identity_dispatch(
            EventKind.password_reset, args, fmt.format_password_reset, True
        )

    async def on_forgot_password_requested(
        self, args: IdentityAuditEventArgs, context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        return await self._identity_dispatch(
            EventKind.forgot_password_requested, args, fmt.format_forgot_password_requested, True
        )

    async def on_forgot_password_changed(
        self, args: IdentityAuditEventArgs, context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        return await self._identity_dispatch(
            EventKind.forgot_password_changed, args, fmt.format_forgot_password_changed, True
        )

    # ========================================================================
    # User administration handlers
    # ========================================================================

    async def on_user_saved(
        self, args: SaveEventArgs[User], context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        async def _build(uow, resolver):
            performing = await self._ambient_context(resolver, context)
            return fmt.format_user_saves(performing, args)

        return await self._dispatch(_build)

    async def on_user_deleted(
        self, args: DeleteEventArgs[User], context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        async def _build(uow, resolver):
            performing = await self._ambient_context(resolver, context)
            return fmt.format_user_deletes(performing, args)

        return await self._dispatch(_build)

    async def on_user_group_saved(
        self, args: SaveEventArgs[UserGroup], context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        async def _build(uow, resolver):
            performing = await self._ambient_context(resolver, context)
            return fmt.format_user_group_saves(performing, args)

        return await self._dispatch(_build)

    async def on_permissions_assigned(
        self, args: PermissionsEventArgs, context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        async def _build(uow, resolver):
            performing = await self._ambient_context(resolver, context)
            groups, entities, assignments = {}, {}, []
            for permission in args.saved_entities:
                group = groups.get(permission.user_group_id)
                if group is None:
                    group = await uow.user_groups.get_by_id(permission.user_group_id)
                if group is None:
                    logger.warning(f"User group {permission.user_group_id} not found")
                    raise ConsistencyViolation(
                        f"No user group found with id {permission.user_group_id}"
                    )
                entity = entities.get(permission.entity_id)
                if entity is None:
                    entity = await uow.entities.get_by_id(permission.entity_id)
                if entity is None:
                    logger.warning(f"Entity {permission.entity_id} not found")
                    raise ConsistencyViolation(f"No entity found with id {permission.entity_id}")
                groups[group.id] = group
                entities[entity.id] = entity
                assignments.append((permission, group, entity))
            return fmt.format_permission_assignments(performing, assignments)

        return await self._dispatch(_build)

    # ========================================================================
    # Member administration handlers
    # ========================================================================

    async def on_member_saved(
        self, args: SaveEventArgs[Member], context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        async def _build(uow, resolver):
            performing = await self._ambient_context(resolver, context)
            return fmt.format_member_saves(performing, args)

        return await self._dispatch(_build)

    async def on_member_deleted(
        self, args: DeleteEventArgs[Member], context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        async def _build(uow, resolver):
            performing = await self._ambient_context(resolver, context)
            return fmt.format_member_deletes(performing, args)

        return await self._dispatch(_build)

    async def on_roles_assigned(
        self, args: RolesEventArgs, context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        async def _build(uow, resolver):
            performing = await self._ambient_context(resolver, context)
            members = await uow.members.get_all_by_ids(args.member_ids)
            return fmt.format_roles_assigned(performing, args, members)

        return await self._dispatch(_build)

    async def on_roles_removed(
        self, args: RolesEventArgs, context: Optional[RequestContext] = None
    ) -> List[AuditEntry]:
        async def _build(uow, resolver):
            performing = await self._ambient_context(resolver, context)
            members = await uow.members.get_all_by_ids(args.member_ids)
            return fmt.format_roles_removed(performing, args, members)

        return await self._dispatch(_build)

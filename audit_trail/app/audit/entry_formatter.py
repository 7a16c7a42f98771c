"""
Audit Entry Formatting

Pure functions turning one event plus its performing context into audit
entries. Same inputs and same `now` always give the same entries.

Plural events fan out to one entry per subject. Every entry built by one call
shares the performing context and a single timestamp capture.
"""

from datetime import UTC, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from audit_trail.domain.entities import (
    AuditEntry,
    AuditEventType,
    Entity,
    Member,
    User,
    UserGroup,
)
from audit_trail.domain.events import (
    DeleteEventArgs,
    EntityPermission,
    RolesEventArgs,
    SaveEventArgs,
)

from .performing_context import PerformingContext

NO_SUBJECT_ID = 0
NOTHING = "(nothing)"
UNKNOWN_NAME = "(unknown)"

# Dirty field names that get their new value appended to the comment
USER_GROUPS_FIELD = "groups"
ALLOWED_SECTIONS_FIELD = "allowed_sections"
PERMISSIONS_FIELD = "permissions"


def format_email(email: Optional[str]) -> str:
    """`<address>` for a non-blank email, empty string otherwise"""
    if email is None or not email.strip():
        return ""
    return f"<{email}>"


def join_list(values: Iterable[str]) -> str:
    return ", ".join(values)


def dirty_summary(dirty_properties: Iterable[str]) -> str:
    """Comma-joined changed fields, or the (nothing) placeholder"""
    summary = join_list(dirty_properties)
    return summary if summary.strip() else NOTHING


def _details(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def performer_details(context: PerformingContext) -> str:
    return _details(context.actor.name, format_email(context.actor.email))


def user_details(user: User) -> str:
    return _details(f'User "{user.name}"', format_email(user.email))


def member_details(member_id: int, member: Optional[Member]) -> str:
    if member is None:
        return f'Member {member_id} "{UNKNOWN_NAME}"'
    return _details(f'Member {member_id} "{member.name}"', format_email(member.email))


def user_group_details(group: UserGroup) -> str:
    return f'User Group {group.id} "{group.name}" ({group.alias})'


def _entry(
    context: PerformingContext,
    timestamp: datetime,
    affected_id: int,
    affected_details: Optional[str],
    event_type: AuditEventType,
    comment: str,
) -> AuditEntry:
    return AuditEntry(
        performing_user_id=context.actor.user_id,
        performing_details=performer_details(context),
        performing_ip=context.ip_address,
        timestamp=timestamp,
        affected_id=affected_id,
        affected_details=affected_details,
        event_type=event_type,
        comment=comment,
    )


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(UTC)


# ============================================================================
# Sign-in and password events
# ============================================================================


def format_login_success(
    context: PerformingContext, now: Optional[datetime] = None
) -> AuditEntry:
    return _entry(context, _now(now), NO_SUBJECT_ID, None, AuditEventType.login, "login success")


def format_logout_success(
    context: PerformingContext, now: Optional[datetime] = None
) -> AuditEntry:
    return _entry(context, _now(now), NO_SUBJECT_ID, None, AuditEventType.logout, "logout success")


def format_login_failed(
    context: PerformingContext, now: Optional[datetime] = None
) -> AuditEntry:
    return _entry(
        context, _now(now), NO_SUBJECT_ID, None, AuditEventType.login_failed, "login failed"
    )


def _password_entry(
    context: PerformingContext,
    affected_user: User,
    event_type: AuditEventType,
    comment: str,
    now: Optional[datetime],
) -> AuditEntry:
    return _entry(
        context, _now(now), affected_user.id, user_details(affected_user), event_type, comment
    )


def format_password_changed(
    context: PerformingContext, affected_user: User, now: Optional[datetime] = None
) -> AuditEntry:
    return _password_entry(
        context, affected_user, AuditEventType.password_change, "password change", now
    )


def format_password_reset(
    context: PerformingContext, affected_user: User, now: Optional[datetime] = None
) -> AuditEntry:
    return _password_entry(
        context, affected_user, AuditEventType.password_reset, "password reset", now
    )


def format_forgot_password_requested(
    context: PerformingContext, affected_user: User, now: Optional[datetime] = None
) -> AuditEntry:
    return _password_entry(
        context,
        affected_user,
        AuditEventType.password_forgot_request,
        "password forgot/request",
        now,
    )


def format_forgot_password_changed(
    context: PerformingContext, affected_user: User, now: Optional[datetime] = None
) -> AuditEntry:
    return _password_entry(
        context,
        affected_user,
        AuditEventType.password_forgot_change,
        "password forgot/change",
        now,
    )


# ============================================================================
# User and user group administration
# ============================================================================


def format_user_saves(
    context: PerformingContext, args: SaveEventArgs[User], now: Optional[datetime] = None
) -> List[AuditEntry]:
    """One user/save entry per saved user, listing its changed fields"""
    timestamp = _now(now)
    entries = []
    for saved in args.saved_entities:
        user = saved.entity
        comment = f"updating {dirty_summary(saved.dirty_properties)}"
        if saved.was_dirty(USER_GROUPS_FIELD):
            comment += f"; groups assigned: {join_list(user.group_aliases)}"
        entries.append(
            _entry(context, timestamp, user.id, user_details(user), AuditEventType.user_save, comment)
        )
    return entries


def format_user_deletes(
    context: PerformingContext, args: DeleteEventArgs[User], now: Optional[datetime] = None
) -> List[AuditEntry]:
    timestamp = _now(now)
    return [
        _entry(
            context, timestamp, user.id, user_details(user), AuditEventType.user_delete, "delete user"
        )
        for user in args.deleted_entities
    ]


def format_user_group_saves(
    context: PerformingContext, args: SaveEventArgs[UserGroup], now: Optional[datetime] = None
) -> List[AuditEntry]:
    """
    One user-group/save entry per saved group.

    When allowed_sections or permissions changed, their new values are
    appended to the comment; other changed fields are listed by name only.
    """
    timestamp = _now(now)
    entries = []
    for saved in args.saved_entities:
        group = saved.entity
        comment = f"updating {dirty_summary(saved.dirty_properties)}"
        if saved.was_dirty(ALLOWED_SECTIONS_FIELD):
            comment += f", assigned sections: {join_list(group.allowed_sections)}"
        if saved.was_dirty(PERMISSIONS_FIELD):
            comment += f", assigned perms: {join_list(group.permissions)}"
        entries.append(
            _entry(
                context,
                timestamp,
                group.id,
                user_group_details(group),
                AuditEventType.user_group_save,
                comment,
            )
        )
    return entries


def format_permission_assignments(
    context: PerformingContext,
    assignments: Iterable[Tuple[EntityPermission, UserGroup, Entity]],
    now: Optional[datetime] = None,
) -> List[AuditEntry]:
    """
    One user-group/permissions-change entry per assignment.

    Args:
        assignments: (permission, resolved group, resolved entity) triples
    """
    timestamp = _now(now)
    entries = []
    for permission, group, entity in assignments:
        assigned = join_list(permission.assigned_permissions)
        comment = (
            f"assigning {assigned if assigned.strip() else NOTHING} "
            f'on id:{permission.entity_id} "{entity.name}" '
            f'for user group "{group.name}"'
        )
        entries.append(
            _entry(
                context,
                timestamp,
                group.id,
                user_group_details(group),
                AuditEventType.user_group_permissions_change,
                comment,
            )
        )
    return entries


# ============================================================================
# Member administration
# ============================================================================


def format_member_saves(
    context: PerformingContext, args: SaveEventArgs[Member], now: Optional[datetime] = None
) -> List[AuditEntry]:
    timestamp = _now(now)
    return [
        _entry(
            context,
            timestamp,
            saved.entity.id,
            member_details(saved.entity.id, saved.entity),
            AuditEventType.member_save,
            f"updating {dirty_summary(saved.dirty_properties)}",
        )
        for saved in args.saved_entities
    ]


def format_member_deletes(
    context: PerformingContext, args: DeleteEventArgs[Member], now: Optional[datetime] = None
) -> List[AuditEntry]:
    timestamp = _now(now)
    entries = []
    for member in args.deleted_entities:
        details = member_details(member.id, member)
        entries.append(
            _entry(
                context,
                timestamp,
                member.id,
                details,
                AuditEventType.member_delete,
                f"delete member id:{member.id} " + _details(f'"{member.name}"', format_email(member.email)),
            )
        )
    return entries


def _role_entries(
    context: PerformingContext,
    args: RolesEventArgs,
    members: Dict[int, Member],
    event_type: AuditEventType,
    verb: str,
    now: Optional[datetime],
) -> List[AuditEntry]:
    timestamp = _now(now)
    roles = join_list(args.roles)
    return [
        _entry(
            context,
            timestamp,
            member_id,
            member_details(member_id, members.get(member_id)),
            event_type,
            f"roles modified, {verb} {roles}",
        )
        for member_id in args.member_ids
    ]


def format_roles_assigned(
    context: PerformingContext,
    args: RolesEventArgs,
    members: Dict[int, Member],
    now: Optional[datetime] = None,
) -> List[AuditEntry]:
    """
    One member/roles/assigned entry per member id, each listing the full
    role set. Members missing from the lookup render as (unknown).
    """
    return _role_entries(context, args, members, AuditEventType.member_roles_assigned, "assigned", now)


def format_roles_removed(
    context: PerformingContext,
    args: RolesEventArgs,
    members: Dict[int, Member],
    now: Optional[datetime] = None,
) -> List[AuditEntry]:
    return _role_entries(context, args, members, AuditEventType.member_roles_removed, "removed", now)

"""
Audit Trail Domain Enums

Event kinds that can be subscribed to and the closed vocabulary of audit tags.
"""

from enum import Enum


class EventKind(str, Enum):
    """Lifecycle signals raised by the identity, user and member services"""

    # Identity / authentication
    login_success = "login_success"
    logout_success = "logout_success"
    login_failed = "login_failed"
    password_changed = "password_changed"
    password_reset = "password_reset"
    forgot_password_requested = "forgot_password_requested"
    forgot_password_changed = "forgot_password_changed"

    # Reserved: subscribable, no handler wired
    account_locked = "account_locked"
    account_unlocked = "account_unlocked"
    login_requires_verification = "login_requires_verification"
    reset_access_failed_count = "reset_access_failed_count"

    # User administration
    user_saved = "user_saved"
    user_deleted = "user_deleted"
    user_group_saved = "user_group_saved"
    user_group_permissions_assigned = "user_group_permissions_assigned"

    # Member administration
    member_saved = "member_saved"
    member_deleted = "member_deleted"
    member_roles_assigned = "member_roles_assigned"
    member_roles_removed = "member_roles_removed"


class AuditEventType(str, Enum):
    """
    Closed, versioned vocabulary of audit entry tags.

    Values are persisted and filtered on; adding or renaming one is a
    compatibility change.
    """

    login = "user/sign-in/login"
    logout = "user/sign-in/logout"
    login_failed = "user/sign-in/failed"
    password_change = "user/password/change"
    password_reset = "user/password/reset"
    password_forgot_request = "user/password/forgot/request"
    password_forgot_change = "user/password/forgot/change"
    user_save = "user/save"
    user_delete = "user/delete"
    user_group_save = "user-group/save"
    user_group_permissions_change = "user-group/permissions-change"
    member_save = "member/save"
    member_delete = "member/delete"
    member_roles_assigned = "member/roles/assigned"
    member_roles_removed = "member/roles/removed"

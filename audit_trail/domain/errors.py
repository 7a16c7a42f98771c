"""
Audit Trail Errors

Every error carries a stable code and a human-readable message.
"""


class AuditError(Exception):
    """Base class for failures that leave an event unaudited"""

    code = "AUDIT_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConsistencyViolation(AuditError):
    """
    An identity or event payload references a user, group or entity that
    the corresponding store cannot resolve.

    Fatal for the event being handled: no entry is written.
    """

    code = "CONSISTENCY_VIOLATION"


class SinkFailure(AuditError):
    """The sink failed to append or persist an entry. Never retried here."""

    code = "SINK_FAILURE"

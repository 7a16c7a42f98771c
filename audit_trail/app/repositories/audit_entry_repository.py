from abc import ABC, abstractmethod

from audit_trail.domain.entities import AuditEntry


class IAuditEntryRepository(ABC):
    """Audit sink interface - application layer"""

    @abstractmethod
    async def append(self, entry: AuditEntry) -> AuditEntry:
        """
        Append an audit entry (immutable, append-only).

        Implementations must be safe to call from concurrent event
        invocations. Failures are raised, never swallowed.
        """
        pass

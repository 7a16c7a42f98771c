from sqlmodel.ext.asyncio.session import AsyncSession

from audit_trail.app.repositories.audit_entry_repository import IAuditEntryRepository
from audit_trail.domain.entities import AuditEntry, AuditLog


class AuditEntryRepository(IAuditEntryRepository):
    """Audit sink implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, entry: AuditEntry) -> AuditEntry:
        """Append an audit entry as a new audit_log row"""
        row = AuditLog(
            performing_user_id=entry.performing_user_id,
            performing_details=entry.performing_details,
            performing_ip=entry.performing_ip,
            timestamp=entry.timestamp,
            affected_id=entry.affected_id,
            affected_details=entry.affected_details,
            event_type=entry.event_type.value,
            comment=entry.comment,
        )
        self.session.add(row)
        await self.session.flush()
        return entry

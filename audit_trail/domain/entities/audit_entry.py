"""
AuditEntry Value

The unit produced by the audit pipeline, handed to the sink exactly once.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import AuditEventType


class AuditEntry(BaseModel):
    """
    AuditEntry - immutable record of one audited action on one subject.

    Business Rules:
    - Immutable once constructed (frozen)
    - performing_user_id is never negative (0 = system pseudo-identity)
    - affected_id 0 means "no specific subject" (sign-in events)
    - affected_details is the only optional field
    - timestamp is captured at formatting time, not event-raise time
    """

    model_config = ConfigDict(frozen=True)

    performing_user_id: int = Field(ge=0)
    performing_details: str
    performing_ip: str
    timestamp: datetime
    affected_id: int
    affected_details: Optional[str] = None
    event_type: AuditEventType
    comment: str

"""
AuditLog Entity

Persisted row of an AuditEntry. Append-only.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class AuditLog(SQLModel, table=True):
    """
    AuditLog entity - durable copy of an AuditEntry.

    Business Rules:
    - Immutable (never updated or deleted)
    - event_type is one of the AuditEventType values
    """

    __tablename__ = "audit_log"

    id: Optional[int] = Field(default=None, primary_key=True)

    performing_user_id: int = Field(nullable=False, index=True)
    performing_details: str = Field(max_length=1024)
    performing_ip: str = Field(default="", max_length=64)

    timestamp: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))

    affected_id: int = Field(nullable=False)
    affected_details: Optional[str] = Field(default=None, max_length=1024)

    event_type: str = Field(max_length=256)
    comment: str = Field(max_length=1024)

    __table_args__ = (
        Index("idx_audit_log_timestamp", "timestamp"),
        Index("idx_audit_log_event_type", "event_type"),
    )

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from audit_trail.app.audit.event_router import EventRouter
from audit_trail.depends import get_event_router

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """GET /health response payload"""

    status: str
    audit_router: str
    subscriptions: int


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthResponse)
async def health_check(audit_router: EventRouter = Depends(get_event_router)):
    """
    Health Check

    Reports whether the audit event router has subscribed to the event
    sources and how many handlers it wired.
    """
    return HealthResponse(
        status="ok",
        audit_router=audit_router.state.value,
        subscriptions=len(audit_router.subscriptions),
    )

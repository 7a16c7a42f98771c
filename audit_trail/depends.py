from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from audit_trail.adapter.services.unit_of_work import SessionScopedUnitOfWork
from audit_trail.api.utils.jwt import principal_from_token
from audit_trail.app.audit.event_router import EventRouter
from audit_trail.domain.events import RequestContext

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


def create_unit_of_work() -> SessionScopedUnitOfWork:
    """Fresh unit of work per audited event"""
    return SessionScopedUnitOfWork(AsyncSessionLocal)


def get_client_ip(request: Request) -> Optional[str]:
    """
    Extract client IP address from request.
    Handles proxies and load balancers.
    """
    x_forwarded_for = request.headers.get("x-forwarded-for")

    if x_forwarded_for:
        # X-Forwarded-For can contain multiple IPs, get the first one
        return x_forwarded_for.split(",")[0].strip()

    if request.client is not None:
        return request.client.host

    return None


async def get_request_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> RequestContext:
    """
    Dependency capturing the ambient identity and caller address once per
    request. Anonymous or invalid tokens yield a context without principal.
    """
    token = credentials.credentials if credentials else None
    return RequestContext(
        principal=principal_from_token(token),
        ip_address=get_client_ip(request),
    )


def get_event_router(request: Request) -> EventRouter:
    return request.app.state.audit_router

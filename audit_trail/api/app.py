from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from audit_trail.app.audit.event_router import EventRouter
from audit_trail.app.audit.performing_context import Actor
from audit_trail.app.events.event_source import (
    identity_event_source,
    member_event_source,
    user_event_source,
)
from audit_trail.app.services.unit_of_work import UnitOfWork
from audit_trail.domain.errors import AuditError
import logging

logger = logging.getLogger(__name__)


async def handle_audit_error(request: Request, exc: AuditError):
    error_dict = {"code": exc.code, "message": exc.message}
    logger.error(f"Audit error: {error_dict}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def create_app(
    ApplicationConfig, uow_factory: Optional[Callable[[], UnitOfWork]] = None
) -> FastAPI:
    if uow_factory is None:
        from audit_trail.depends import create_unit_of_work

        uow_factory = create_unit_of_work

    audit_router = EventRouter(
        identity_events=identity_event_source(),
        user_events=user_event_source(),
        member_events=member_event_source(),
        uow_factory=uow_factory,
        system_actor=Actor(user_id=0, name=ApplicationConfig.SYSTEM_USER_NAME, email=""),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        audit_router.register()
        yield

    app = FastAPI(title="Audit Trail", version="0.1.0", lifespan=lifespan)
    app.state.audit_router = audit_router

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from audit_trail.api.routes import health_check

    app.include_router(health_check.router, tags=["Health"])

    app.add_exception_handler(AuditError, handle_audit_error)

    return app

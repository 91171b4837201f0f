import logging
import uuid
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rentmate import config
from rentmate.clock import Clock, SystemClock
from rentmate.database import SessionLocal, check_connection
from rentmate.exceptions import RentmateError
from rentmate.logging_config import LogContext, configure_logging
from rentmate.realtime import RealtimeHub
from rentmate.routers import (
    applications,
    auth,
    conversations,
    leases,
    maintenance,
    notifications,
    payments,
    properties,
    realtime,
    rent_schedule,
)

logger = logging.getLogger("rentmate.api")


def create_app(
    clock: Optional[Clock] = None,
    hub: Optional[RealtimeHub] = None,
    session_factory=None,
) -> FastAPI:
    """Build the API. Tests pass their own clock, hub and session factory."""
    app = FastAPI(title="RentMate API", version="0.1.0")
    app.state.clock = clock or SystemClock()
    app.state.hub = hub or RealtimeHub()
    app.state.session_factory = session_factory or SessionLocal

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        with LogContext.bind(request_id=request_id):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(RentmateError)
    async def rentmate_error_handler(request: Request, exc: RentmateError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})

    @app.exception_handler(StarletteHTTPException)
    async def route_not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return await http_exception_handler(request, exc)

    @app.get("/")
    def root():
        return {"message": "RentMate API is running"}

    @app.get("/health")
    def health():
        return {"status": "ok", "database": "ok" if check_connection() else "unavailable"}

    app.include_router(auth.router)
    app.include_router(properties.router)
    app.include_router(applications.router)
    app.include_router(leases.router)
    app.include_router(maintenance.router)
    app.include_router(payments.router)
    app.include_router(rent_schedule.router)
    app.include_router(notifications.router)
    app.include_router(conversations.router)
    app.include_router(realtime.router)
    return app


configure_logging(level=config.LOG_LEVEL, fmt=config.LOG_FORMAT)
app = create_app()

if __name__ == "__main__":
    uvicorn.run("rentmate.main:app", host="0.0.0.0", port=config.PORT)

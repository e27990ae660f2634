import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.middleware import SlowAPIMiddleware
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from . import errors
from .config import get_settings
from .db import Database
from .logging_config import configure_logging
from .rate_limit import limiter
from .routers import (
    auth,
    dashboard,
    purchases,
    transfers,
    assignments,
    expenditures,
    assets,
    personnel,
    bases,
    equipment_types,
    audit,
    health,
)


settings = get_settings()
logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "Route not found. Please check the API documentation."


def _error_response(status_code: int, message: str, fields: Optional[list[str]] = None, headers=None) -> JSONResponse:
    body: dict = {"success": False, "error": message}
    if fields:
        body["fields"] = fields
    return JSONResponse(body, status_code=status_code, headers=headers)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc, errors.LedgerError):
        return _error_response(exc.status_code, exc.detail, getattr(exc, "fields", None), exc.headers)
    if exc.status_code == 404:
        return _error_response(404, ROUTE_NOT_FOUND)
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # drop the leading "query"/"path" part of each location
    fields = [".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]) for err in exc.errors()]
    return _error_response(400, f"Invalid value for: {', '.join(fields)}", fields)


async def store_failure_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return _error_response(errors.StoreFailure.status_code, errors.StoreFailure.default_detail)


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit exceeded for %s on %s", request.client.host if request.client else "-", request.url.path)
    return _error_response(429, "Too many attempts. Please wait a minute and try again.")


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(500, errors.LedgerError.default_detail)


def create_app(database: Optional[Database] = None) -> FastAPI:
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.db is None:
            app.state.db = Database(settings.database_url)
        logger.info("Server started (%s)", settings.app_env)
        yield
        logger.info("Shutting down")
        await app.state.db.dispose()

    app = FastAPI(title="Armory Ledger API", version="0.1.0", docs_url="/swagger", redoc_url=None, lifespan=lifespan)
    app.state.db = database
    app.state.started_at = time.monotonic()
    app.state.limiter = limiter

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_failure_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s -> %s (%.1f ms) client=%s",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            request.client.host if request.client else "-",
        )
        return response

    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
    app.include_router(purchases.router, prefix="/purchases", tags=["purchases"])
    app.include_router(transfers.router, prefix="/transfers", tags=["transfers"])
    app.include_router(assignments.router, prefix="/assignments", tags=["assignments"])
    app.include_router(expenditures.router, prefix="/expenditures", tags=["expenditures"])
    app.include_router(assets.router, prefix="/assets", tags=["assets"])
    app.include_router(personnel.router, prefix="/personnel", tags=["personnel"])
    app.include_router(bases.router, prefix="/bases", tags=["bases"])
    app.include_router(equipment_types.router, prefix="/equipment-types", tags=["equipment-types"])
    app.include_router(audit.router, prefix="/audit-logs", tags=["audit"])
    return app


app = create_app()

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tenant_iam.app.repositories.errors import StoreUnavailableError
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


def _retry_after_headers(details):
    if not details:
        return None
    if "retry_after_seconds" in details:
        return {"Retry-After": str(details["retry_after_seconds"])}
    if "retry_after_minutes" in details:
        return {"Retry-After": str(int(details["retry_after_minutes"]) * 60)}
    return None


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    if exc.base_error.details:
        error_dict["details"] = exc.base_error.details
    logger.warning(f"Client error on {request.url.path}: {exc.base_error.code}")

    headers = None
    if exc.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
        headers = _retry_after_headers(exc.base_error.details)
    return JSONResponse(
        status_code=exc.status_code, content={"error": error_dict}, headers=headers
    )


async def handle_server_error(request: Request, exc: ServerError):
    if exc.status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
        message = exc.base_error.message
    else:
        message = "Internal server error"
    error_dict = {"code": exc.base_error.code, "message": message}
    logger.error(f"Server error on {request.url.path}: {exc.base_error.code}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_store_unavailable(request: Request, exc: Exception):
    logger.error(f"Store unavailable on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": {
                "code": "SERVICE_UNAVAILABLE",
                "message": "Service temporarily unavailable, please retry",
            }
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    from sqlmodel import SQLModel

    from tenant_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
    from tenant_iam.app.services.catalog_seeder import seed_catalog
    from tenant_iam.depends import AsyncSessionLocal, engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    async with AsyncSessionLocal() as session:
        await seed_catalog(SqlAlchemyUnitOfWork(session))
    yield
    await engine.dispose()


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Tenant IAM", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from tenant_iam.api.routes import admin, auth, health_check, permissions, sessions, users

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(sessions.router, prefix=prefix, tags=["Sessions"])
    app.include_router(users.router, prefix=prefix, tags=["Users"])
    app.include_router(permissions.router, prefix=prefix, tags=["Permissions"])
    app.include_router(admin.router, prefix=prefix, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(StoreUnavailableError, handle_store_unavailable)
    app.add_exception_handler(asyncio.TimeoutError, handle_store_unavailable)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.db import Database
from core.errors import ServiceError, StorageError, ValidationError
from core.log import configure_logging
from core.settings import Settings
from products import router as products_router
from products.repository import ProductStore

logger = logging.getLogger(__name__)


def _format_request_error(error: dict) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ()))
    return f"{loc}: {error.get('msg', 'invalid value')}"


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One store per process, handed to routes through app.state.
        database = Database(settings.products_db_path, timeout_s=settings.sqlite_busy_timeout_s)
        database.ensure_parent_dir()
        store = ProductStore(database, seed_on_empty=settings.seed_on_empty)
        report = await store.initialize()
        logger.info(
            "products_store_ready db=%s migrated=%s seeded=%s",
            database.path,
            report.migrated,
            report.seeded,
        )
        app.state.product_store = store
        try:
            yield
        finally:
            app.state.product_store = None

    app = FastAPI(title="products-api", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "request method=%s path=%s status=%s duration_ms=%.1f",
                request.method,
                request.url.path,
                status_code,
                elapsed_ms,
            )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(_: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.public_message, "errors": exc.errors},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "detail": ValidationError.public_message,
                "errors": [_format_request_error(e) for e in exc.errors()],
            },
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        if isinstance(exc, StorageError):
            logger.error(
                "storage_error method=%s path=%s",
                request.method,
                request.url.path,
                exc_info=exc,
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.public_message})

    app.include_router(products_router.router, tags=["products"])

    @app.get("/health")
    def health() -> dict:
        return {"ok": True}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(app, host=settings.host, port=settings.port)

"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog.api.v1 import router as v1_router
from catalog.core.config import settings
from catalog.core.database import SessionLocal, init_db
from catalog.core.errors import CatalogError, ErrorKind, InvalidInputError
from catalog.services.seed import seed_sample_data

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

# Failure kind -> (HTTP status, short error title)
ERROR_STATUS: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.VALIDATION: (status.HTTP_400_BAD_REQUEST, "Invalid Input"),
    ErrorKind.CONFLICT: (status.HTTP_409_CONFLICT, "Conflict"),
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Not Found"),
    ErrorKind.UNAUTHENTICATED: (status.HTTP_401_UNAUTHORIZED, "Unauthenticated"),
    ErrorKind.ACCESS_DENIED: (status.HTTP_403_FORBIDDEN, "Access Denied"),
    ErrorKind.INVALID_CREDENTIALS: (status.HTTP_401_UNAUTHORIZED, "Authentication Failed"),
}


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    if settings.DB_CREATE_ALL:
        init_db()
    if settings.SEED_SAMPLE_DATA:
        db = SessionLocal()
        try:
            seed_sample_data(db)
        finally:
            db.close()
    yield


app = FastAPI(
    title="Catalog API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_body(status_code: int, error: str, code: str, message: str, request: Request) -> dict:
    return {
        "status": status_code,
        "error": error,
        "code": code,
        "message": message,
        "path": request.url.path,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Render a service failure with the status its kind maps to."""
    status_code, error = ERROR_STATUS[exc.kind]
    logger.warning("%s %s -> %s %s: %s", request.method, request.url.path, status_code, exc.code, exc.message)
    body = _error_body(status_code, error, exc.code, exc.message, request)
    if isinstance(exc, InvalidInputError) and exc.field:
        body["field"] = exc.field
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.UNAUTHENTICATED else None
    return JSONResponse(status_code=status_code, content=body, headers=headers)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Storage outages and bugs: log with traceback, reveal nothing."""
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal Server Error",
            "INTERNAL_ERROR",
            "An unexpected error occurred",
            request,
        ),
    )


app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Catalog API"}

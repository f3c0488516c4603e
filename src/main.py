import tomllib
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from http import HTTPStatus
from pathlib import Path

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.config import get_allowed_origins, get_app_settings
from src.db.config import get_db_settings
from src.db.database import Database, get_database
from src.db.phone_modes.router import router as phone_modes_router
from src.db.phone_modes.seeder import seed_on_connect
from src.schemas import HealthResponse, RootResponse
from src.utils.logger import logger


def get_version():
    """Get version from pyproject.toml"""
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)
    return data["project"]["version"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Own the Database handle for the life of the process.

    A missing DB_URL fails startup. A database that is configured but
    unreachable is logged; the next request retries the connection.
    """
    database = Database(get_db_settings(), on_connect=seed_on_connect)
    app.state.database = database

    try:
        await database.connect()
    except Exception as e:
        logger.exception(
            "[DATABASE] Initial connection failed, will retry on demand",
            error=str(e),
        )

    yield

    await database.close()


app = FastAPI(
    title="Phone Mode API",
    description="Maps phone numbers to CALL or OTP handling",
    version=get_version(),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(phone_modes_router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400s."""
    logger.info("Rejected malformed request", path=request.url.path)
    return JSONResponse(
        status_code=HTTPStatus.BAD_REQUEST,
        content={"detail": "Invalid request body"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; the cause is logged, never returned."""
    logger.exception("Unhandled error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/", response_model=RootResponse)
async def root() -> RootResponse:
    """Root endpoint."""
    return RootResponse(
        service=get_app_settings().service_name, time=datetime.now(UTC)
    )


@app.get(
    "/health",
    response_model=HealthResponse,
    responses={HTTPStatus.INTERNAL_SERVER_ERROR: {"model": HealthResponse}},
)
async def health(database: Database = Depends(get_database)):
    """Health check endpoint; pings the database."""
    try:
        await database.connect()
        await database.ping()
    except Exception as e:
        logger.exception("[DATABASE] Health check failed", error=str(e))
        unhealthy = HealthResponse(
            status="unhealthy", database="disconnected", timestamp=datetime.now(UTC)
        )
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            content=unhealthy.model_dump(mode="json"),
        )

    return HealthResponse(
        status="healthy", database="connected", timestamp=datetime.now(UTC)
    )


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    settings = get_app_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)

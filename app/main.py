# app/main.py
from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.database import create_db_and_tables, get_engine, get_sweet_repo, get_user_repo
from app.seed import seed_demo_data

# Routers
from app.routers.auth import router as auth_router
from app.routers.sweets import router as sweets_router
from app.routers.admin_stats import router as admin_stats_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Create tables when running on the database backend.
      - Seed the demo admin and catalogue if enabled.

    Shutdown:
      - Nothing to clean up; stores are synchronous.
    """
    logger.info("Startup: storage backend is '%s'", settings.STORAGE_BACKEND)
    if settings.STORAGE_BACKEND == "database":
        try:
            create_db_and_tables(get_engine())
            logger.info("Startup: DB connection OK, tables verified.")
        except Exception as e:
            logger.error(f"Startup: DB connection FAILED: {e}")
            raise

    if settings.SEED_DEMO_DATA:
        # Resolve through the overrides so tests seed the stores they inspect
        user_repo = app.dependency_overrides.get(get_user_repo, get_user_repo)()
        sweet_repo = app.dependency_overrides.get(get_sweet_repo, get_sweet_repo)()
        seed_demo_data(
            user_repo,
            sweet_repo,
            settings.SEED_ADMIN_EMAIL,
            settings.SEED_ADMIN_PASSWORD,
        )
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error handling ---


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Report the first violation as a 400 instead of FastAPI's 422 list.
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
        message = first.get("msg", "Invalid input")
        detail = f"{'.'.join(loc)}: {message}" if loc else message
    else:
        detail = "Invalid input"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Last resort: log the traceback, return a generic 500 without internals.
    """
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(sweets_router, prefix=settings.API_PREFIX)
app.include_router(admin_stats_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "sweet-shop-backend"}


def run() -> None:
    """Entry point for the `sweet-shop` console script."""
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()

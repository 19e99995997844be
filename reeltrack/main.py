"""Main FastAPI application"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import auth, entries, system
from .config import settings
from .database import engine, init_db
from .exceptions import StoreError
from .services.log_service import log_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    await init_db()
    try:
        yield
    except asyncio.CancelledError:
        pass  # Suppress CancelledError during shutdown
    finally:
        await engine.dispose()


app = FastAPI(
    title="ReelTrack",
    description="Personal movie and TV catalogue with watch progress",
    version=__version__,
    lifespan=lifespan,
)

# If ALLOWED_ORIGINS is not set, default to ["*"] without credentials
allowed_origins = ["*"]
allow_credentials = False

if settings.ALLOWED_ORIGINS:
    allowed_origins = settings.ALLOWED_ORIGINS.split(",")
    allow_credentials = True

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(entries.router)
app.include_router(system.router)


@app.get("/api/health")
async def health_check():
    """Liveness check"""
    return {"status": "ok", "message": "Server is running"}


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    """Store failures are already logged; callers get no details"""
    log_service.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

"""Main FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from nightguard.api import admin_routes, auth_routes, routes
from nightguard.api.errors import register_exception_handlers
from nightguard.logging_config import configure_logging
from nightguard.services.auth import ensure_default_admin
from nightguard.storage.factory import provider

STATIC_DIR = Path(__file__).resolve().parent / "static"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    provider.startup()

    storages = provider()
    try:
        ensure_default_admin(next(storages))
    finally:
        storages.close()

    logger.info("NightGuard started")
    yield


# Create FastAPI app
app = FastAPI(
    title="NightGuard - Venue Security Register",
    description="Incident reports, guard sign-ins, CCTV checks and shift schedules for licensed venues.",
    version="0.1.0",
    lifespan=lifespan
)

# Enable CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # For MVP - restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(auth_routes.router, prefix="/api", tags=["Auth"])
app.include_router(routes.router, prefix="/api", tags=["Operations"])
app.include_router(admin_routes.router, prefix="/api", tags=["Admin"])

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.get("/", include_in_schema=False)
def root():
    """Serve the dashboard."""
    return FileResponse(STATIC_DIR / "index.html")


# Health check
@app.get("/health")
def health_check():
    return {"status": "healthy", "service": "NightGuard"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

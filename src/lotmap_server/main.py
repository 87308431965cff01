"""LOTMAP - interactive subdivision lot map.

Main FastAPI application.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from loguru import logger

from lotmap_server.config import settings
from lotmap_server.routers import map_router
from lotmap_server.sessions import SessionManager

VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("=" * 60)
    logger.info(f"  LOTMAP v{VERSION} - INITIALIZING")
    logger.info("=" * 60)

    config = settings.map_config()
    logger.info(
        f"Map variant: {settings.variant} (basemap={config.basemap}, "
        f"label_min_zoom={config.label_min_zoom}, anchor={config.label_anchor})"
    )

    source = settings.lots_source
    if not source.startswith(("http://", "https://")) and not Path(source).exists():
        logger.warning(f"Lots source not found: {source} (sessions will show the failure notice)")
    else:
        logger.info(f"Lots source: {source}")

    app.state.sessions = SessionManager(
        config,
        source,
        max_sessions=settings.max_sessions,
        max_zoom=settings.max_zoom,
    )

    logger.info("=" * 60)
    logger.info("  LOTMAP ONLINE")
    logger.info("=" * 60)

    yield

    logger.info("LOTMAP shutting down...")


# Create FastAPI app
app = FastAPI(
    title="LOTMAP",
    description="Interactive subdivision lot map",
    version=VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(map_router)


@app.get("/", response_class=HTMLResponse)
async def root():
    """Landing page pointing at the session API."""
    return HTMLResponse(
        content=f"""
        <html>
            <head><title>LOTMAP</title></head>
            <body style="font-family: sans-serif;">
                <h1>LOTMAP v{VERSION}</h1>
                <p>The session API is at /api/map.</p>
            </body>
        </html>
        """
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "operational",
        "version": VERSION,
        "system": "LOTMAP",
    }


@app.get("/api/status")
async def status():
    """System status endpoint."""
    return {
        "name": settings.app_name,
        "version": VERSION,
        "variant": settings.variant,
        "lots_source": settings.lots_source,
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "lotmap_server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )

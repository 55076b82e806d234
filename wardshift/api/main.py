"""
FastAPI main application for WardShift backend.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wardshift.core.config import Config
from wardshift.core.exceptions import WardShiftError
from wardshift.db.connection import build_session_factory
from wardshift.db.repository import PersistenceProvider
from wardshift.services.auth import AuthService
from wardshift.services.workspace import SessionRegistry
from wardshift.api.routes import auth, shifts, patients, tasks, beds, reports, reference
from wardshift.api.websocket import router as ws_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong. Please try again."


def create_app(database_url: Optional[str] = None, seed_demo_data: Optional[bool] = None) -> FastAPI:
    """
    Build the WardShift application.

    Args:
        database_url: Overrides Config.DATABASE_URL (tests pass ``sqlite://``)
        seed_demo_data: Overrides Config.SEED_DEMO_DATA
    """
    db_url = database_url or Config.DATABASE_URL
    seed = Config.SEED_DEMO_DATA if seed_demo_data is None else seed_demo_data

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting WardShift backend...")

        session_factory = build_session_factory(db_url)
        app.state.auth_service = AuthService(session_factory)
        app.state.sessions = SessionRegistry(PersistenceProvider(session_factory))

        if seed:
            app.state.auth_service.seed_demo_accounts()

        logger.info("WardShift backend started successfully")

        yield

        # Shutdown
        logger.info("Shutting down WardShift backend...")
        await app.state.sessions.close_all()
        session_factory.kw["bind"].dispose()
        logger.info("Backend shutdown complete")

    app = FastAPI(
        title="WardShift API",
        description="Shift, patient, task and bed management for a hospital unit",
        version="1.0.0",
        lifespan=lifespan
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(WardShiftError)
    async def handle_domain_error(request: Request, exc: WardShiftError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR})

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "WardShift API",
            "version": "1.0.0",
            "timestamp": datetime.now().isoformat()
        }

    @app.get("/api/health")
    async def health_check():
        """Detailed health check."""
        sessions = getattr(app.state, "sessions", None)
        return {
            "status": "healthy",
            "components": {
                "sessions": "running" if sessions else "not initialized",
                "open_workspaces": sessions.open_count if sessions else 0
            },
            "config": {
                "debug": Config.DEBUG,
                "seed_demo_data": seed
            }
        }

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(shifts.router, prefix="/api/shifts", tags=["shifts"])
    app.include_router(patients.router, prefix="/api/patients", tags=["patients"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(beds.router, prefix="/api/beds", tags=["beds"])
    app.include_router(reports.router, prefix="/api/reports", tags=["reports"])
    app.include_router(reference.router, prefix="/api", tags=["reference"])
    app.include_router(ws_router)

    return app


app = create_app()

"""Food Waste Tracker - Backend API"""
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.routes import VERSION
from .api.routes import router as api_router
from .config import API_HOST, API_PORT, DATABASE_PATH, UPLOAD_DIR, get_cors_origins
from .database import close_database, init_database
from .services import UploadService, build_analyzer

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - database init, analyzer setup, and cleanup."""
    logger.info("server_starting", version=VERSION)

    app.state.db = await init_database(DATABASE_PATH)
    app.state.uploads = UploadService(UPLOAD_DIR)
    app.state.analyzer = build_analyzer()

    yield

    await close_database(app.state.db)
    logger.info("server_stopping")


app = FastAPI(
    title="Food Waste Tracker",
    description="Photograph food waste, classify it with Gemini, track it over time",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(api_router)

# Stored uploads (directory is created on startup)
app.mount("/uploads", StaticFiles(directory=str(UPLOAD_DIR), check_dir=False), name="uploads")


def run() -> None:
    """Run the API server."""
    uvicorn.run(app, host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    run()

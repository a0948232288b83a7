"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import albums, exports, groups
from db import init_db
from services.photo_optimizer import register_heif_opener
from settings import settings

logger = logging.getLogger(__name__)

# Register HEIF/HEIC opener at startup (for iPhone photos)
heif_available = register_heif_opener()


# Create app
app = FastAPI(
    title="Photo Journal API",
    description="Albums, group profiles and PDF booklet export",
    version="0.1.0",
)

# CORS middleware for the mobile/web client
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount static files for stored photos
media_path = Path(settings.MEDIA_ROOT)
media_path.mkdir(parents=True, exist_ok=True)
app.mount("/media", StaticFiles(directory=str(media_path)), name="media")

# Include routers
app.include_router(groups.router, prefix="/groups", tags=["groups"])
app.include_router(albums.router, prefix="/albums", tags=["albums"])
app.include_router(exports.router, prefix="/exports", tags=["exports"])


@app.on_event("startup")
def startup_event():
    """Initialize database tables on startup."""
    init_db()
    logger.info("Photo Journal API started (media_root=%s, heif=%s)", media_path, heif_available)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Photo Journal API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}

"""
Video Summary Service — FastAPI Application

Wires the summaries router, CORS, and the database into one app. Batches of
video links come in through /api/v1/summaries; everything slow (noembed
lookups, Claude calls) runs in background tasks, and PDFs are laid out on
demand when a finished summary is downloaded.

Run with:
    uvicorn app.main:app --reload --port 8000
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import check_db, init_db
from app.routers import summaries

# Registers SummaryJob with Base.metadata before init_db() runs create_all()
import app.models  # noqa: F401

SERVICE_NAME = "Video Summary Service"
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    print(f"🚀 Starting {SERVICE_NAME} API ({settings.APP_ENV})...")
    await init_db()
    print("✅ summary_jobs table ready")

    if not settings.ANTHROPIC_API_KEY:
        print("⚠️ ANTHROPIC_API_KEY is not set, summaries will fail until it is")
    if settings.has_custom_fonts:
        print("🔤 Custom PDF fonts configured")

    yield

    print("👋 Shutting down...")


app = FastAPI(
    title=f"{SERVICE_NAME} API",
    description="Batch AI summaries of video links, delivered as paginated PDFs",
    version=VERSION,
    lifespan=lifespan,
)

# The web client downloads PDFs cross-origin and reads the filename
# from Content-Disposition, which browsers hide unless it's exposed.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

app.include_router(summaries.router)


# --- Health Check Endpoints ---

@app.get("/", tags=["health"])
async def root():
    return {
        "service": SERVICE_NAME,
        "status": "running",
        "version": VERSION,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """Database connectivity plus whether summaries can be generated."""
    db_status = await check_db()

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        "summarizer": "configured" if settings.ANTHROPIC_API_KEY else "missing api key",
        "pdf": {
            "page_size": settings.PDF_PAGE_SIZE,
            "font_family": settings.PDF_FONT_FAMILY,
            "custom_fonts": settings.has_custom_fonts,
        },
        "environment": settings.APP_ENV,
    }

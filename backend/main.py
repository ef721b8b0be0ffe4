"""SpeakerCalc Backend — FastAPI application entry point."""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from backend.routes import calculations, enclosure, export, extract
from backend.middleware.rate_limit import RateLimitMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    from backend.database import init_db
    init_db()
    logger.info("SpeakerCalc backend ready")
    yield


app = FastAPI(
    title="SpeakerCalc API",
    description="Loudspeaker enclosure calculator and panel layout export",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: allow frontend origins
_frontend_url = os.getenv("FRONTEND_URL")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[_frontend_url] if _frontend_url else [],
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting: 60 req/min general, 10 req/min for the AI route
app.add_middleware(
    RateLimitMiddleware,
    requests_per_minute=int(os.getenv("RATE_LIMIT_PER_MINUTE", "60")),
    ai_requests_per_minute=int(os.getenv("AI_RATE_LIMIT_PER_MINUTE", "10")),
)

# Register route modules
app.include_router(enclosure.router, prefix="/api", tags=["Enclosure"])
app.include_router(export.router, prefix="/api", tags=["Export"])
app.include_router(extract.router, prefix="/api", tags=["AI Extraction"])
app.include_router(calculations.router, prefix="/api", tags=["Saved Calculations"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "speakercalc-backend"}

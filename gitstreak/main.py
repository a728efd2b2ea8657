"""FastAPI application entry point"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Optional
import logging

from gitstreak.config.settings import settings
from gitstreak.jobs.streak_sync import (
    apply_display_format,
    describe_display_formats,
    run_connection_test,
    run_streak_refresh,
)
from gitstreak.orchestrator import StreakOrchestrator
from gitstreak.services.streak.formatter import preview_template
from gitstreak.services.streak.templates import resolve_template

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="GitHub contribution streak status service",
    version=settings.APP_VERSION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global orchestrator instance; holds the last computed snapshot
orchestrator = StreakOrchestrator()


class DisplaySettings(BaseModel):
    display_format: str
    custom_format: Optional[str] = None


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "refresh_interval_seconds": settings.STREAK_REFRESH_INTERVAL_SECONDS,
        "status": "running",
        "endpoints": {
            "health": "/api/health",
            "streak": "/api/streak",
            "refresh": "POST /api/refresh?username=",
            "display": "PUT /api/display",
            "display_formats": "/api/display/formats",
            "preview": "/api/display/preview?display_format=&custom_format=",
            "test_connection": "POST /api/test-connection",
        }
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "gitstreak",
        "version": settings.APP_VERSION,
        "refresh_interval_seconds": settings.STREAK_REFRESH_INTERVAL_SECONDS
    }


@app.get("/api/streak")
async def get_streak():
    """Last rendered streak title and snapshot"""
    if orchestrator.last_snapshot is None:
        raise HTTPException(status_code=503, detail=orchestrator.menu_text)
    return orchestrator.status()


@app.post("/api/refresh")
async def refresh_streak(username: Optional[str] = None):
    """Fetch the contribution calendar and recompute the streak"""
    logger.info("Manual refresh triggered")
    result = await run_streak_refresh(orchestrator=orchestrator, username=username)
    if not result["success"]:
        raise HTTPException(status_code=502, detail=result["error"])
    return result


@app.put("/api/display")
async def update_display(display: DisplaySettings):
    """Change the display template and re-render the cached snapshot"""
    return apply_display_format(
        orchestrator,
        display_format=display.display_format,
        custom_format=display.custom_format,
    )


@app.get("/api/display/formats")
async def list_display_formats():
    return {"formats": describe_display_formats()}


@app.get("/api/display/preview")
async def preview_display(display_format: str = "emoji", custom_format: Optional[str] = None):
    template = resolve_template(display_format, custom_format)
    return {"display_format": template.tag, "preview": preview_template(template)}


@app.post("/api/test-connection")
async def test_connection():
    """Probe GitHub API reachability"""
    result = await run_connection_test(orchestrator=orchestrator)
    if not result["success"]:
        raise HTTPException(status_code=502, detail=result["menu_text"])
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "gitstreak.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )

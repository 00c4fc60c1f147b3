# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: liveness, store readiness and the Prometheus scrape endpoint.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from guild_roster.core.config import settings
from guild_roster.core.dependencies import get_store
from guild_roster.core.logging import get_logger

router = APIRouter(tags=["System"])
logger = get_logger(__name__)


@router.get("/health")
def health_check():
    """Process is up. Does not touch the roster store."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready")
def readiness_check(store=Depends(get_store)):
    try:
        store.ping()
        documents = store.count()
    except Exception as exc:
        logger.error("Roster store not reachable: %s", exc)
        raise HTTPException(status_code=503, detail=f"Roster store unavailable: {exc}")
    return {
        "status": "ready",
        "store": type(store).__name__,
        "documents": documents,
        "strict_swap_positions": settings.STRICT_SWAP_POSITIONS,
    }


@router.get("/metrics")
def prometheus_metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

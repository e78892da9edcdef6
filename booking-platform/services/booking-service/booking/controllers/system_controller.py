# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints — health, readiness, metrics.
Pure HTTP layer — no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from booking.core.config import settings
from booking.core.dependencies import get_store

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check():
    """Liveness probe for Docker and orchestration."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "document_store": settings.DOCUMENT_STORE,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready")
def readiness_check():
    """Readiness probe — verifies the document store answers."""
    try:
        get_store().verify_connection()
    except Exception as exc:
        raise HTTPException(status_code=503, detail=f"Document store unavailable: {exc}")
    return {
        "status": "ready",
        "service": settings.SERVICE_NAME,
        "document_store": settings.DOCUMENT_STORE,
    }


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

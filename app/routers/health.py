# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness and readiness for monitoring and load balancers. None of these
# require a session.
#
# Readiness probes what the console can't work without: the products table,
# the admin roster (every request resolves a role from it) and the media
# bucket named by STORAGE_BUCKET.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Callable

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from core.services.record_store import PRODUCTS_TABLE
from lib.supabase_client import ADMIN_TABLE, SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ProbeResult(BaseModel):
    """Outcome of one readiness probe."""
    target: str
    status: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: dict[str, ProbeResult]
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _probe(target: str, check: Callable[[], object]) -> ProbeResult:
    try:
        check()
    except Exception as e:
        logger.warning(f"Readiness probe failed for {target}: {e}")
        return ProbeResult(target=target, status=f"unhealthy: {str(e)[:80]}")
    return ProbeResult(target=target, status="healthy")


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Process is up; no dependencies are touched."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check endpoint.

    Returns "ready" only when the catalog table, the admin roster and the
    configured media bucket all answer; otherwise "degraded" with the
    failing probe's error.
    """
    try:
        client = SupabaseClient.get_client()
    except Exception as e:
        logger.error(f"Readiness: no Supabase client: {e}")
        failed = ProbeResult(target=settings.SUPABASE_URL, status=f"unhealthy: {str(e)[:80]}")
        return ReadinessResponse(
            status="degraded",
            checks={"catalog": failed, "roster": failed, "media_bucket": failed},
            timestamp=_now(),
        )

    checks = {
        "catalog": _probe(
            PRODUCTS_TABLE,
            lambda: client.table(PRODUCTS_TABLE).select("id").limit(1).execute(),
        ),
        "roster": _probe(
            ADMIN_TABLE,
            lambda: client.table(ADMIN_TABLE).select("admin_id").limit(1).execute(),
        ),
        "media_bucket": _probe(
            settings.STORAGE_BUCKET,
            lambda: client.storage.get_bucket(settings.STORAGE_BUCKET),
        ),
    }

    ready = all(c.status == "healthy" for c in checks.values())
    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """Liveness for container restart decisions."""
    return LivenessResponse(status="alive", timestamp=_now())

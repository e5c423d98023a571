"""Liveness, readiness and metrics endpoints."""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from people.api.dependencies import get_db
from people.core.database import DatabaseManager

router = APIRouter(tags=["health"])


@router.get("/health")
async def healthcheck(request: Request) -> Dict[str, str]:
    """Liveness probe."""

    return {"status": "ok", "environment": request.app.state.settings.ENVIRONMENT}


@router.get("/health/ready")
async def readiness(database: DatabaseManager = Depends(get_db)) -> Dict[str, str]:
    """Readiness probe; storage failures surface through the ApplicationError handler."""

    await database.ping()
    return {"status": "ready", "database": database.database.name}


@router.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from src.students.schemas import HealthResponse

router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(message="Server is running", timestamp=datetime.now(timezone.utc))

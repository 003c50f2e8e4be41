from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from app.config import Settings, get_settings
from app.schemas import HealthResponse

router = APIRouter(prefix="/api", tags=["health"])

@router.get("/health", response_model=HealthResponse)
def health_check(settings: Settings = Depends(get_settings)):
    return HealthResponse(
        status="OK",
        message="Frontend is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.ENVIRONMENT or "development",
    )

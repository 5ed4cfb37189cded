"""Health check endpoints."""

from fastapi import APIRouter, Depends

from lesson_content.api.deps import get_app_settings
from lesson_content.core.config import Settings

router = APIRouter()


@router.get("/health", tags=["system"])
def healthcheck(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
    """Simple readiness probe."""

    return {"status": "ok", "app": settings.app_name}

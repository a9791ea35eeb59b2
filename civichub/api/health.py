"""Health check endpoint."""

from fastapi import APIRouter

from civichub.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict:
    return {"status": "ok", "service": settings.app_name}

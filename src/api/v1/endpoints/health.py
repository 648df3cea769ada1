from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from ....config import get_settings

router = APIRouter()


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    settings = get_settings()

    return {
        "status": "healthy",
        "service": "News Digest API",
        "version": "0.1.0",
        "environment": "development" if settings.debug else "production",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

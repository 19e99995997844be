"""System API routes (status, logs)"""

from fastapi import APIRouter, Depends, Query

from .. import __version__
from ..api.auth import get_current_user
from ..config import settings as app_settings
from ..models.user import User
from ..services.log_service import log_service

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/status")
async def system_status():
    """Basic system status check"""
    return {
        "status": "ok",
        "version": __version__,
        "data_dir": str(app_settings.DATA_DIR),
        "logs_dir": str(app_settings.LOGS_DIR),
    }


@router.get("/logs")
async def get_logs(
    type: str = Query("error", pattern="^(error|info)$"),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(get_current_user),
):
    """Get recent log entries"""
    logs = log_service.get_logs(type, limit)
    return {"log_type": type, "lines": logs, "count": len(logs)}

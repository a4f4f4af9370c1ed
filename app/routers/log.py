from fastapi import APIRouter
from typing import List

from app.models.activity_log import ActivityLog
from app.schemas.activity_log import ActivityLogResponse

router = APIRouter()

MAX_LOG_ENTRIES = 500


@router.get("", response_model=List[ActivityLogResponse])
async def list_logs():
    """Newest activity first."""
    return await ActivityLog.find_all().sort(-ActivityLog.time).limit(MAX_LOG_ENTRIES).to_list()

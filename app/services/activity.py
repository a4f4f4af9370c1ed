import logging
from datetime import datetime, timedelta
from typing import Optional

from app.core.config import settings
from app.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


def is_duplicate(last: Optional[ActivityLog], user: str, action: str, now: datetime) -> bool:
    """True when ``last`` is the same user+action within the duplicate window."""
    if last is None:
        return False

    window = timedelta(seconds=settings.DUPLICATE_LOG_WINDOW_SECONDS)
    return (
        (last.user or "Unknown") == user
        and (last.action or "") == action
        and now - last.time <= window
    )


async def log_activity(user: Optional[str], action: Optional[str], now: Optional[datetime] = None) -> Optional[ActivityLog]:
    """
    Append an entry to the activity log.

    Identical consecutive entries inside the duplicate window are dropped.
    Errors are logged and swallowed.
    """
    safe_user = str(user or "Unknown")
    safe_action = str(action or "")
    now = now or datetime.utcnow()

    try:
        last = await ActivityLog.find_all().sort(-ActivityLog.time).first_or_none()
        if is_duplicate(last, safe_user, safe_action, now):
            logger.debug("Suppressed duplicate activity: %s - %s", safe_user, safe_action)
            return None

        entry = ActivityLog(user=safe_user, action=safe_action, time=now)
        await entry.insert()
        return entry
    except Exception:
        logger.exception("log_activity error")
        return None

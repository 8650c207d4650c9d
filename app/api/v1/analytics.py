"""Admin analytics snapshot endpoint."""

from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.auth import require_permission
from app.core.config import get_settings
from app.core.database import get_db
from app.core.permissions import Permission
from app.schemas.analytics import AnalyticsSnapshot
from app.schemas.auth import CurrentUser
from app.services.analytics import compute_snapshot

router = APIRouter()


@router.get("", response_model=AnalyticsSnapshot)
def get_analytics(
    _staff: Annotated[CurrentUser, Depends(require_permission(Permission.VIEW_ANALYTICS))],
    db: Annotated[Session, Depends(get_db)],
    range_: Annotated[
        str | None, Query(alias="range", description="day, week, month or year (default week)")
    ] = None,
) -> AnalyticsSnapshot:
    """
    Return user, listing and message statistics plus a per-day activity series.

    The series spans `range` days back through today (day: 2 points, week: 8,
    month: 31, year: 366). Unknown range values fall back to week.
    """
    tz = ZoneInfo(get_settings().ANALYTICS_TIMEZONE)
    return compute_snapshot(db, range_, tz)

"""Admin analytics: totals, distributions and a per-day activity series.

All counts are read-only and independent; the snapshot is best effort and
makes no cross-query consistency promise. "Now" is captured once per call so
every window and day boundary derives from the same instant.
"""

import logging
from collections import Counter
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from app.core.permissions import ROLE_VALUES
from app.models import Category, Message, Product, Server, User
from app.schemas.analytics import (
    ActivitySeries,
    AnalyticsSnapshot,
    MessageStats,
    ProductStats,
    RoleDistribution,
    UserStats,
)

logger = logging.getLogger(__name__)

# Days of history before today shown in the activity series; today is always included.
RANGE_DAYS: dict[str, int] = {"day": 1, "week": 7, "month": 30, "year": 365}
DEFAULT_RANGE = "week"

# Fixed windows for "new users" counts, independent of the selected range.
WEEK_WINDOW = timedelta(days=7)
MONTH_WINDOW = timedelta(days=30)

DATE_LABEL_FORMAT = "%d.%m.%Y"


def resolve_range(value: str | None) -> str:
    """Return a known range name; anything unrecognized falls back to 'week'."""
    if value is None:
        return DEFAULT_RANGE
    normalized = value.strip().lower()
    return normalized if normalized in RANGE_DAYS else DEFAULT_RANGE


def local_midnight(day: date, tz: tzinfo) -> datetime:
    """Start of the calendar day in the given zone."""
    return datetime.combine(day, time.min, tzinfo=tz)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps come back from backends without zone support; they are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _count_if(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def _user_stats(db: Session, now: datetime, today_start: datetime) -> UserStats:
    totals = db.execute(
        select(
            func.count(User.id),
            _count_if(User.is_banned.is_(False)),
            _count_if(User.is_banned.is_(True)),
            _count_if(User.created_at >= _as_utc(today_start)),
            _count_if(User.created_at >= _as_utc(now - WEEK_WINDOW)),
            _count_if(User.created_at >= _as_utc(now - MONTH_WINDOW)),
        )
    ).one()
    roles = dict.fromkeys(ROLE_VALUES, 0)
    for role, count in db.execute(select(User.role, func.count(User.id)).group_by(User.role)):
        if role in roles:
            roles[role] = count
    return UserStats(
        total=totals[0],
        active=totals[1],
        banned=totals[2],
        new_today=totals[3],
        new_this_week=totals[4],
        new_this_month=totals[5],
        role_distribution=RoleDistribution(**roles),
    )


def _counts_by_name(db: Session, lookup, foreign_key) -> dict[str, int]:
    """Listing count per lookup row name; every lookup row appears, zero when unused."""
    rows = db.execute(
        select(lookup.name, func.count(Product.id))
        .select_from(lookup)
        .outerjoin(Product, foreign_key == lookup.id)
        .group_by(lookup.id, lookup.name)
        .order_by(lookup.id)
    )
    counts: dict[str, int] = {}
    for name, count in rows:
        counts[name] = counts.get(name, 0) + count
    return counts


def _product_stats(db: Session, today_start: datetime) -> ProductStats:
    totals = db.execute(
        select(
            func.count(Product.id),
            _count_if(Product.status == "pending"),
            _count_if(Product.status == "approved"),
            _count_if(Product.status == "rejected"),
            _count_if(Product.created_at >= _as_utc(today_start)),
        )
    ).one()
    return ProductStats(
        total=totals[0],
        pending=totals[1],
        approved=totals[2],
        rejected=totals[3],
        new_today=totals[4],
        by_category=_counts_by_name(db, Category, Product.category_id),
        by_server=_counts_by_name(db, Server, Product.server_id),
    )


def _message_stats(db: Session, today_start: datetime) -> MessageStats:
    totals = db.execute(
        select(
            func.count(Message.id),
            _count_if(Message.is_moderated.is_(False)),
            _count_if(Message.is_moderated.is_(True)),
            _count_if(Message.created_at >= _as_utc(today_start)),
        )
    ).one()
    return MessageStats(
        total=totals[0],
        pending=totals[1],
        moderated=totals[2],
        new_today=totals[3],
    )


def _zone_argument(tz: tzinfo) -> str | timedelta:
    """Zone name for Postgres timezone(); fixed-offset zones without a name pass their offset."""
    key = getattr(tz, "key", None)
    if key:
        return key
    return tz.utcoffset(None) or timedelta(0)


def _grouped_day_counts(db: Session, created_at, window, tz: tzinfo) -> dict[date, int]:
    local_days = (
        select(func.date(func.timezone(_zone_argument(tz), created_at)).label("day"))
        .where(*window)
        .subquery()
    )
    rows = db.execute(
        select(local_days.c.day, func.count()).group_by(local_days.c.day)
    )
    return {day: count for day, count in rows}


def _bucketed_day_counts(db: Session, created_at, window, tz: tzinfo) -> dict[date, int]:
    # Backends without zone-aware date functions (SQLite) bucket the window's rows here.
    buckets: Counter[date] = Counter()
    for value in db.execute(select(created_at).where(*window)).scalars():
        if value is None:
            continue
        buckets[_as_utc(value).astimezone(tz).date()] += 1
    return buckets


def _daily_counts(
    db: Session,
    created_at,
    days: list[date],
    tz: tzinfo,
) -> list[int]:
    """
    Count rows per local calendar day with one query over the whole series window.

    Day d covers [midnight(d), midnight(d + 1)) in tz. On PostgreSQL the rows are
    grouped by local day in the database.
    """
    start = local_midnight(days[0], tz)
    end = local_midnight(days[-1] + timedelta(days=1), tz)
    window = (created_at >= _as_utc(start), created_at < _as_utc(end))
    if db.get_bind().dialect.name == "postgresql":
        counts = _grouped_day_counts(db, created_at, window, tz)
    else:
        counts = _bucketed_day_counts(db, created_at, window, tz)
    return [counts.get(day, 0) for day in days]


def build_activity_series(
    db: Session,
    today: date,
    days_back: int,
    tz: tzinfo,
) -> ActivitySeries:
    """Per-day new users, listings and messages from days_back days ago through today inclusive."""
    days = [today - timedelta(days=offset) for offset in range(days_back, -1, -1)]
    return ActivitySeries(
        dates=[day.strftime(DATE_LABEL_FORMAT) for day in days],
        new_users=_daily_counts(db, User.created_at, days, tz),
        new_products=_daily_counts(db, Product.created_at, days, tz),
        new_messages=_daily_counts(db, Message.created_at, days, tz),
    )


def compute_snapshot(
    db: Session,
    range_value: str | None,
    tz: tzinfo,
    now: datetime | None = None,
) -> AnalyticsSnapshot:
    """
    Build the analytics snapshot for the selected range.

    The range only controls the activity series depth; the "new users"
    windows (today, last 7 days, last 30 days) are fixed.
    """
    selected = resolve_range(range_value)
    current = (now or datetime.now(UTC)).astimezone(tz)
    today = current.date()
    today_start = local_midnight(today, tz)

    snapshot = AnalyticsSnapshot(
        range=selected,
        users=_user_stats(db, current, today_start),
        products=_product_stats(db, today_start),
        messages=_message_stats(db, today_start),
        activity=build_activity_series(db, today, RANGE_DAYS[selected], tz),
    )
    logger.debug(
        "Analytics snapshot computed",
        extra={"range": selected, "points": len(snapshot.activity.dates)},
    )
    return snapshot

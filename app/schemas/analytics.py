"""Schemas for the admin analytics snapshot."""

from typing import Literal

from app.schemas.common import APIModel

AnalyticsRange = Literal["day", "week", "month", "year"]


class RoleDistribution(APIModel):
    admin: int = 0
    moderator: int = 0
    user: int = 0


class UserStats(APIModel):
    total: int
    active: int
    banned: int
    new_today: int
    new_this_week: int
    new_this_month: int
    role_distribution: RoleDistribution


class ProductStats(APIModel):
    total: int
    pending: int
    approved: int
    rejected: int
    new_today: int
    by_category: dict[str, int]
    by_server: dict[str, int]


class MessageStats(APIModel):
    total: int
    pending: int
    moderated: int
    new_today: int


class ActivitySeries(APIModel):
    """Parallel per-day sequences, oldest day first."""

    dates: list[str]
    new_users: list[int]
    new_products: list[int]
    new_messages: list[int]


class AnalyticsSnapshot(APIModel):
    range: AnalyticsRange
    users: UserStats
    products: ProductStats
    messages: MessageStats
    activity: ActivitySeries

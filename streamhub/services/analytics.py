# streamhub/services/analytics.py
"""
Role-scoped, read-only rollups.

Overview figures are all-time totals; the ``window`` block repeats the
activity-based figures for the requested time range. Nothing is cached:
every call recomputes from the source tables.
"""
import csv
import io
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.errors import ValidationError
from streamhub.models.subscription_model import Subscription
from streamhub.models.user_model import User, UserRole
from streamhub.models.video_model import Review, Video, WatchHistory
from streamhub.utils.clock import ensure_aware, utcnow

TIME_RANGES = {
    "24h": timedelta(days=1),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "1y": timedelta(days=365),
}
DEFAULT_TIME_RANGE = "7d"
RECENT_ROWS = 10


def window_start(time_range: str, now: Optional[datetime] = None) -> datetime:
    try:
        span = TIME_RANGES[time_range]
    except KeyError:
        raise ValidationError(f"Invalid timeRange: {time_range}")
    return (now or utcnow()) - span


async def _scalar(session: AsyncSession, stmt):
    return (await session.execute(stmt)).scalar_one()


def _display_name(user: Optional[User]) -> Optional[str]:
    if not user:
        return None
    return user.name or user.email or user.phone


async def admin_rollup(session: AsyncSession, since: datetime, now: datetime) -> dict:
    total_users = await _scalar(session, select(func.count(User.id)))
    total_creators = await _scalar(
        session, select(func.count(User.id)).where(User.role == UserRole.CREATOR.value)
    )
    total_videos = await _scalar(
        session, select(func.count(Video.id)).where(Video.is_public.is_(True))
    )
    total_revenue = await _scalar(session, select(func.coalesce(func.sum(Subscription.price), 0)))
    active_subscriptions = await _scalar(
        session,
        select(func.count(Subscription.id)).where(
            Subscription.is_active.is_(True), Subscription.end_date > now
        ),
    )

    new_users = await _scalar(session, select(func.count(User.id)).where(User.created_at >= since))
    window_revenue = await _scalar(
        session,
        select(func.coalesce(func.sum(Subscription.price), 0)).where(Subscription.created_at >= since),
    )

    recent = (
        await session.execute(
            select(Subscription)
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
            .limit(RECENT_ROWS)
        )
    ).scalars().all()

    return {
        "overview": {
            "totalUsers": total_users,
            "totalCreators": total_creators,
            "totalVideos": total_videos,
            "totalRevenue": int(total_revenue or 0),
            "activeSubscriptions": active_subscriptions,
        },
        "window": {
            "newUsers": new_users,
            "revenue": int(window_revenue or 0),
        },
        "recentTransactions": [
            {
                "id": s.id,
                "user": _display_name(s.user),
                "amount": s.price,
                "plan": s.plan.value,
                "date": ensure_aware(s.created_at).date().isoformat(),
            }
            for s in recent
        ],
    }


async def creator_rollup(session: AsyncSession, creator_id: int, since: datetime) -> dict:
    own_public = (Video.created_by == creator_id, Video.is_public.is_(True))

    videos_count = await _scalar(session, select(func.count(Video.id)).where(*own_public))
    total_views = await _scalar(
        session, select(func.coalesce(func.sum(Video.view_count), 0)).where(*own_public)
    )

    history_of_own = (
        select(
            WatchHistory.id,
            WatchHistory.user_id,
            WatchHistory.watch_time,
            WatchHistory.watched_at,
        )
        .join(Video, Video.id == WatchHistory.video_id)
        .where(Video.created_by == creator_id)
        .subquery()
    )
    total_watch_time = await _scalar(
        session, select(func.coalesce(func.sum(history_of_own.c.watch_time), 0))
    )
    window_views = await _scalar(
        session,
        select(func.count(history_of_own.c.id)).where(history_of_own.c.watched_at >= since),
    )
    window_watch_time = await _scalar(
        session,
        select(func.coalesce(func.sum(history_of_own.c.watch_time), 0)).where(
            history_of_own.c.watched_at >= since
        ),
    )

    # approximation: everything paid by viewers who watched this creator
    viewers = select(distinct(history_of_own.c.user_id))
    revenue = await _scalar(
        session,
        select(func.coalesce(func.sum(Subscription.price), 0)).where(Subscription.user_id.in_(viewers)),
    )

    return {
        "overview": {
            "totalViews": int(total_views or 0),
            "totalWatchTime": int(total_watch_time or 0),
            "revenue": int(revenue or 0),
            "videosCount": videos_count,
        },
        "window": {
            "views": window_views,
            "watchTime": int(window_watch_time or 0),
        },
    }


async def user_rollup(session: AsyncSession, user_id: int, since: datetime) -> dict:
    total_watched = await _scalar(
        session, select(func.count(WatchHistory.id)).where(WatchHistory.user_id == user_id)
    )
    total_watch_time = await _scalar(
        session,
        select(func.coalesce(func.sum(WatchHistory.watch_time), 0)).where(WatchHistory.user_id == user_id),
    )
    content_liked = await _scalar(
        session, select(func.count(Review.id)).where(Review.user_id == user_id)
    )
    window_watched = await _scalar(
        session,
        select(func.count(WatchHistory.id)).where(
            WatchHistory.user_id == user_id, WatchHistory.watched_at >= since
        ),
    )

    history = (
        await session.execute(
            select(WatchHistory)
            .where(WatchHistory.user_id == user_id)
            .order_by(WatchHistory.watched_at.desc(), WatchHistory.id.desc())
            .limit(RECENT_ROWS)
        )
    ).scalars().all()

    return {
        "overview": {
            "totalWatched": total_watched,
            "totalWatchTime": int(total_watch_time or 0),
            "contentLiked": content_liked,
        },
        "window": {
            "watched": window_watched,
        },
        "recentActivity": [
            {
                "title": h.video.title,
                "watchedAt": ensure_aware(h.watched_at).date().isoformat(),
                "duration": (h.video.duration or 0) // 60,
            }
            for h in history
        ],
    }


async def build(
    session: AsyncSession,
    role: str,
    user_id: int,
    time_range: str = DEFAULT_TIME_RANGE,
    now: Optional[datetime] = None,
) -> dict:
    now = now or utcnow()
    since = window_start(time_range, now)

    if role == UserRole.ADMIN.value:
        data = await admin_rollup(session, since, now)
    elif role == UserRole.CREATOR.value:
        data = await creator_rollup(session, user_id, since)
    elif role == UserRole.USER.value:
        data = await user_rollup(session, user_id, since)
    else:
        raise ValidationError(f"Invalid userRole: {role}")

    data["role"] = role
    data["timeRange"] = time_range
    data["window"]["start"] = since.isoformat()
    data["window"]["end"] = now.isoformat()
    return data


def export_filename(role: str, time_range: str, now: Optional[datetime] = None) -> str:
    today = (now or utcnow()).date().isoformat()
    return f"{role.lower()}-analytics-{time_range}-{today}.csv"


def to_csv(data: dict) -> str:
    """Flattens the overview and window rollups into ``Metric,Value`` rows."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["Metric", "Value"])
    for key, value in data.get("overview", {}).items():
        writer.writerow([key, value])
    for key, value in data.get("window", {}).items():
        writer.writerow([f"window.{key}", value])

    for row in data.get("recentTransactions", []):
        writer.writerow([f"transaction.{row['id']}", f"{row['date']} {row['plan']} {row['amount']} {row['user'] or ''}".strip()])
    for row in data.get("recentActivity", []):
        writer.writerow([f"watched.{row['watchedAt']}", row["title"]])
    return buf.getvalue()

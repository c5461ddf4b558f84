# streamhub/services/videos.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.errors import NotFoundError, ValidationError
from streamhub.models.user_model import User
from streamhub.models.video_model import Review, Video, VideoCategory, VideoLanguage, WatchHistory

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def is_publicly_visible():
    """The only gate between the approval workflow and the public feed."""
    return and_(Video.is_public.is_(True), Video.approved_at.isnot(None))


def format_duration(seconds: int) -> str:
    seconds = max(int(seconds or 0), 0)
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _parse_filter(enum_cls, value: Optional[str], label: str):
    if not value or value.strip().lower() == "all":
        return None
    try:
        return enum_cls[value.strip().upper()]
    except KeyError:
        raise ValidationError(f"Unknown {label}: {value}")


def _escape_like(value: str) -> str:
    # user input matches literally
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _rating_subquery():
    return (
        select(
            Review.video_id.label("video_id"),
            func.avg(Review.rating).label("avg_rating"),
            func.count(Review.id).label("review_count"),
        )
        .group_by(Review.video_id)
        .subquery()
    )


def to_card(video: Video, avg_rating, review_count) -> dict:
    creator = video.creator
    return {
        "id": video.id,
        "title": video.title,
        "description": video.description,
        "thumbnail": video.thumbnail,
        "duration": format_duration(video.duration),
        "year": video.release_year,
        "language": video.language,
        "rating": round(float(avg_rating or 0), 1),
        "review_count": int(review_count or 0),
        "category": video.category,
        "view_count": video.view_count or 0,
        "creator": {
            "id": video.created_by,
            "name": creator.name if creator else None,
            "avatar": creator.avatar if creator else None,
        },
        "is_premium": video.is_premium,
        "age_rating": video.age_rating,
    }


async def list_public(
    session: AsyncSession,
    category: Optional[str] = None,
    language: Optional[str] = None,
    search: Optional[str] = None,
    trending: bool = False,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> Tuple[List[dict], bool]:
    """Returns ``(cards, has_more)`` for one page of the public feed."""
    ratings = _rating_subquery()
    stmt = (
        select(Video, ratings.c.avg_rating, ratings.c.review_count)
        .outerjoin(ratings, ratings.c.video_id == Video.id)
        .where(is_publicly_visible())
    )

    cat = _parse_filter(VideoCategory, category, "category")
    if cat is not None:
        stmt = stmt.where(Video.category == cat)

    lang = _parse_filter(VideoLanguage, language, "language")
    if lang is not None:
        stmt = stmt.where(Video.language == lang)

    if search and search.strip():
        term = f"%{_escape_like(search.strip())}%"
        stmt = stmt.where(
            or_(
                Video.title.ilike(term, escape="\\"),
                Video.description.ilike(term, escape="\\"),
                Video.tags.ilike(term, escape="\\"),
            )
        )

    if trending:
        stmt = stmt.order_by(Video.view_count.desc(), Video.id.desc())
    else:
        stmt = stmt.order_by(Video.created_at.desc(), Video.id.desc())

    stmt = stmt.limit(limit).offset(offset)
    rows = (await session.execute(stmt)).all()
    cards = [to_card(video, avg, count) for video, avg, count in rows]
    return cards, len(cards) == limit


async def get_public_video(session: AsyncSession, video_id: int) -> dict:
    ratings = _rating_subquery()
    stmt = (
        select(Video, ratings.c.avg_rating, ratings.c.review_count)
        .outerjoin(ratings, ratings.c.video_id == Video.id)
        .where(Video.id == video_id, is_publicly_visible())
    )
    row = (await session.execute(stmt)).first()
    if not row:
        raise NotFoundError("Video not found")

    video, avg, count = row
    card = to_card(video, avg, count)
    card.update(video_url=video.video_url, tags=video.tags, approved_at=video.approved_at)
    return card


async def list_pending(session: AsyncSession) -> List[Video]:
    stmt = (
        select(Video)
        .where(Video.approved_at.is_(None))
        .order_by(Video.created_at.asc(), Video.id.asc())
    )
    return list((await session.execute(stmt)).scalars().all())


async def record_watch(session: AsyncSession, video_id: int, user_id: int, watch_time: int) -> WatchHistory:
    video_exists = (
        await session.execute(
            select(func.count(Video.id)).where(Video.id == video_id, is_publicly_visible())
        )
    ).scalar_one()
    if not video_exists:
        raise NotFoundError("Video not found")

    if not await session.get(User, user_id):
        raise NotFoundError("User not found")

    entry = WatchHistory(user_id=user_id, video_id=video_id, watch_time=watch_time)
    session.add(entry)
    await session.execute(
        update(Video)
        .where(Video.id == video_id)
        .values(view_count=Video.view_count + 1)
    )
    await session.commit()
    await session.refresh(entry)
    return entry

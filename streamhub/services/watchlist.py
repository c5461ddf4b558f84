# streamhub/services/watchlist.py
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.errors import DuplicateError, NotFoundError
from streamhub.models.user_model import User
from streamhub.models.video_model import Video
from streamhub.models.watchlist_model import WatchlistItem


async def add_item(session: AsyncSession, user_id: int, video_id: int) -> WatchlistItem:
    if not await session.get(User, user_id):
        raise NotFoundError("User not found")

    video = (await session.execute(select(Video).where(Video.id == video_id))).scalars().first()
    if not video:
        raise NotFoundError("Video not found")

    existing = await session.execute(
        select(WatchlistItem.id).where(
            WatchlistItem.user_id == user_id, WatchlistItem.video_id == video_id
        )
    )
    if existing.first():
        raise DuplicateError("Video already in watchlist")

    item = WatchlistItem(user_id=user_id, video_id=video_id, video=video)
    session.add(item)
    try:
        await session.commit()
    except IntegrityError:
        # lost a race against a concurrent add of the same pair
        await session.rollback()
        raise DuplicateError("Video already in watchlist")
    await session.refresh(item)
    return item


async def remove_item(session: AsyncSession, user_id: int, video_id: int) -> None:
    result = await session.execute(
        delete(WatchlistItem)
        .where(WatchlistItem.user_id == user_id, WatchlistItem.video_id == video_id)
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        raise NotFoundError("Video not found in watchlist")
    await session.commit()


async def list_items(session: AsyncSession, user_id: int) -> List[WatchlistItem]:
    stmt = (
        select(WatchlistItem)
        .where(WatchlistItem.user_id == user_id)
        .order_by(WatchlistItem.added_at.desc(), WatchlistItem.id.desc())
    )
    return list((await session.execute(stmt)).scalars().all())

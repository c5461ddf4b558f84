from typing import List

from streamhub.models.video_model import AgeRating, VideoCategory, VideoLanguage
from streamhub.schemas.base import CamelModel, RequestModel, UtcDatetime
from streamhub.schemas.video_schemas import CreatorSummary


class WatchlistCreate(RequestModel):
    user_id: int
    video_id: int


class WatchlistVideo(CamelModel):
    id: int
    title: str
    description: str
    thumbnail: str
    duration: int
    category: VideoCategory
    language: VideoLanguage
    age_rating: AgeRating
    is_premium: bool
    creator: CreatorSummary


class WatchlistItemOut(CamelModel):
    id: int
    user_id: int
    video_id: int
    added_at: UtcDatetime
    video: WatchlistVideo


class WatchlistResponse(CamelModel):
    watchlist: List[WatchlistItemOut]


class WatchlistAddResponse(CamelModel):
    watchlist_item: WatchlistItemOut
    message: str

from typing import List, Optional

from fastapi import Form
from pydantic import Field, ValidationError as PydanticValidationError

from streamhub.errors import ValidationError
from streamhub.models.video_model import AgeRating, VideoCategory, VideoLanguage
from streamhub.schemas.base import CamelModel, RequestModel, UtcDatetime


class VideoCreate(CamelModel):
    title: str
    description: str
    category: VideoCategory
    language: VideoLanguage
    release_year: Optional[int] = Field(default=None, ge=1888, le=2100)
    age_rating: AgeRating = AgeRating.U
    is_premium: bool = False
    tags: Optional[str] = None
    duration: int = Field(default=0, ge=0)

    @classmethod
    def as_form(
            cls,
            title: str = Form(...),
            description: str = Form(...),
            category: str = Form(...),
            language: str = Form(...),
            release_year: Optional[int] = Form(None, alias="releaseYear"),
            age_rating: str = Form("U", alias="ageRating"),
            is_premium: bool = Form(False, alias="isPremium"),
            tags: Optional[str] = Form(None),
            duration: int = Form(0),
    ) -> "VideoCreate":
        try:
            return cls(
                title=title,
                description=description,
                category=category.strip().upper(),
                language=language.strip().upper(),
                release_year=release_year,
                age_rating=age_rating.strip().upper() or "U",
                is_premium=is_premium,
                tags=tags,
                duration=duration,
            )
        except PydanticValidationError as e:
            fields = ", ".join(str(err["loc"][-1]) for err in e.errors())
            raise ValidationError(f"Invalid video metadata: {fields}")


class CreatorSummary(CamelModel):
    id: int
    name: Optional[str] = None
    avatar: Optional[str] = None


class VideoOut(CamelModel):
    id: int
    title: str
    description: str
    thumbnail: str
    video_url: str
    duration: int
    category: VideoCategory
    language: VideoLanguage
    release_year: Optional[int] = None
    age_rating: AgeRating
    is_premium: bool
    is_public: bool
    approved_at: Optional[UtcDatetime] = None
    view_count: int
    tags: Optional[str] = None
    created_by: int
    created_at: UtcDatetime


class VideoCard(CamelModel):
    id: int
    title: str
    description: str
    thumbnail: str
    duration: str
    year: Optional[int] = None
    language: VideoLanguage
    rating: float
    review_count: int
    category: VideoCategory
    view_count: int
    creator: CreatorSummary
    is_premium: bool
    age_rating: AgeRating


class VideoFeed(CamelModel):
    videos: List[VideoCard]
    total: int
    has_more: bool


class VideoDetail(VideoCard):
    video_url: str
    tags: Optional[str] = None
    approved_at: Optional[UtcDatetime] = None


class PendingVideo(VideoOut):
    creator: CreatorSummary


class PendingQueue(CamelModel):
    videos: List[PendingVideo]


class UploadAck(CamelModel):
    id: int
    title: str
    status: str


class UploadResponse(CamelModel):
    video: UploadAck
    message: str


class ApproveResponse(CamelModel):
    video: VideoOut
    message: str


class WatchEventCreate(RequestModel):
    user_id: int
    watch_time: int = Field(default=0, ge=0)


class WatchEventOut(CamelModel):
    id: int
    user_id: int
    video_id: int
    watch_time: int
    watched_at: UtcDatetime

import enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    Enum as SqlEnum,
    text,
)
from sqlalchemy.orm import relationship

from streamhub.database import Base
from streamhub.utils.clock import utcnow


class VideoCategory(enum.Enum):
    MOVIE = "MOVIE"
    WEB_SERIES = "WEB_SERIES"
    MUSIC = "MUSIC"
    CULTURE = "CULTURE"
    DOCUMENTARY = "DOCUMENTARY"


class VideoLanguage(enum.Enum):
    HINDI = "HINDI"
    ENGLISH = "ENGLISH"
    NAGPURI = "NAGPURI"
    SANTALI = "SANTALI"
    KHORTHA = "KHORTHA"
    OTHER = "OTHER"


class AgeRating(enum.Enum):
    U = "U"
    U_A = "U_A"
    A = "A"
    S = "S"


class Video(Base):
    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False)
    thumbnail = Column(String(2048), nullable=False)
    video_url = Column(String(2048), nullable=False)
    duration = Column(Integer, nullable=False, default=0)  # seconds
    category = Column(SqlEnum(VideoCategory, name="video_category"), nullable=False)
    language = Column(SqlEnum(VideoLanguage, name="video_language"), nullable=False)
    release_year = Column(Integer, nullable=True)
    age_rating = Column(SqlEnum(AgeRating, name="age_rating"), nullable=False, default=AgeRating.U)
    is_premium = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    tags = Column(String(500), nullable=True)

    # approval state: approved_at NULL means pending
    is_public = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    approved_at = Column(DateTime(timezone=True), nullable=True)

    view_count = Column(Integer, nullable=False, default=0, server_default="0")

    created_by = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    creator = relationship("User", lazy="joined")


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "video_id", name="uq_review_user_video"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(Integer, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1..5
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class WatchHistory(Base):
    __tablename__ = "watch_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(Integer, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True)
    watch_time = Column(Integer, nullable=False, default=0)  # seconds
    watched_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    video = relationship("Video", lazy="joined")

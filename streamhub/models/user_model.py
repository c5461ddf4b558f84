import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, text
from sqlalchemy.orm import relationship

from streamhub.database import Base
from streamhub.utils.clock import utcnow


class UserRole(enum.Enum):
    USER = "USER"
    CREATOR = "CREATOR"
    ADMIN = "ADMIN"


class UserStatus(enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # email and phone are both valid login keys; at least one is set
    email = Column(String(320), unique=True, index=True, nullable=True)
    phone = Column(String(20), unique=True, index=True, nullable=True)
    password = Column(String, nullable=True)
    name = Column(String(120), nullable=True)
    avatar = Column(String(2048), nullable=True)
    role = Column(String(16), nullable=False, default=UserRole.USER.value, server_default=UserRole.USER.value)
    status = Column(String(16), nullable=False, default=UserStatus.ACTIVE.value, server_default=UserStatus.ACTIVE.value)
    is_verified = Column(Boolean, default=False, nullable=False, server_default=text("false"))

    # cached pointer to the latest purchased subscription
    subscription_id = Column(Integer, nullable=True)
    subscription_end = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    profiles = relationship(
        "UserProfile",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by=lambda: [UserProfile.created_at, UserProfile.id],
        lazy="selectin",
    )


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(80), nullable=False)
    avatar = Column(String(2048), nullable=True)
    is_kids = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    preferences = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="profiles")

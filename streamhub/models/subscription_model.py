import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum as SqlEnum, text
from sqlalchemy.orm import relationship

from streamhub.database import Base
from streamhub.utils.clock import utcnow


class SubscriptionPlan(enum.Enum):
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"
    LIFETIME = "LIFETIME"


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    plan = Column(SqlEnum(SubscriptionPlan, name="subscription_plan"), nullable=False)
    price = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    # cancelling clears this flag; end_date is left alone
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    payment_id = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", lazy="joined")

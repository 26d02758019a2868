"""Database models for free-tier usage and subscriptions."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from infrastructure.db.base import Base


class UserApiLimit(Base):
    """Free-tier generations consumed by one caller."""

    __tablename__ = "user_api_limits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, unique=True, nullable=False, index=True)
    count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<UserApiLimit(user_id={self.user_id}, count={self.count})>"


class UserSubscription(Base):
    """Paid plan state mirrored from the billing provider."""

    __tablename__ = "user_subscriptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, unique=True, nullable=False, index=True)
    stripe_customer_id = Column(String(255), unique=True, nullable=True)
    stripe_subscription_id = Column(String(255), unique=True, nullable=True)
    stripe_price_id = Column(String(255), nullable=True)
    stripe_current_period_end = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<UserSubscription(user_id={self.user_id}, "
            f"period_end='{self.stripe_current_period_end}')>"
        )


__all__ = ["UserApiLimit", "UserSubscription"]

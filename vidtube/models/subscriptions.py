import uuid

from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Uuid

from vidtube.db.database import Base
from vidtube.models.users import utcnow


class Subscription(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_pair"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # the user who subscribes
    subscriber_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # the user being subscribed to
    channel_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

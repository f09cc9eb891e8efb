import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, UniqueConstraint, Uuid

from vidtube.db.database import Base
from vidtube.models.users import utcnow


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (
        # a like points at exactly one subject
        CheckConstraint(
            "CAST(video_id IS NOT NULL AS INTEGER)"
            " + CAST(comment_id IS NOT NULL AS INTEGER)"
            " + CAST(tweet_id IS NOT NULL AS INTEGER) = 1",
            name="ck_likes_single_subject",
        ),
        UniqueConstraint("video_id", "liked_by_id", name="uq_likes_video_user"),
        UniqueConstraint("comment_id", "liked_by_id", name="uq_likes_comment_user"),
        UniqueConstraint("tweet_id", "liked_by_id", name="uq_likes_tweet_user"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    video_id = Column(Uuid, ForeignKey("videos.id", ondelete="CASCADE"), nullable=True, index=True)
    comment_id = Column(Uuid, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    tweet_id = Column(Uuid, ForeignKey("tweets.id", ondelete="CASCADE"), nullable=True, index=True)

    liked_by_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

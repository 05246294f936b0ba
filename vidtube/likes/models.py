# vidtube/likes/models.py
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import CheckConstraint, Integer, ForeignKey, UniqueConstraint
from vidtube.db.base import Base, TimestampMixin


class Like(TimestampMixin, Base):
    """
    Like de un usuario sobre exactamente un objetivo: video, comentario o tweet.
    Un usuario solo puede dar like una vez al mismo objetivo.
    """

    __tablename__ = "likes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    video_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("videos.id"), nullable=True, index=True
    )
    comment_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("comments.id"), nullable=True, index=True
    )
    tweet_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tweets.id"), nullable=True, index=True
    )

    liked_by_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("liked_by_id", "video_id", name="uq_like_user_video"),
        UniqueConstraint("liked_by_id", "comment_id", name="uq_like_user_comment"),
        UniqueConstraint("liked_by_id", "tweet_id", name="uq_like_user_tweet"),
        CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="ck_like_single_target",
        ),
    )

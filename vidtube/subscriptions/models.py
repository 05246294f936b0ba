# vidtube/subscriptions/models.py
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import CheckConstraint, ForeignKey, Integer, UniqueConstraint
from vidtube.db.base import Base, TimestampMixin


class Subscription(TimestampMixin, Base):
    """
    subscriber sigue al canal channel (ambos son usuarios).
    Nadie puede suscribirse a sí mismo y el par es único.
    """
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscription_pair"),
        CheckConstraint("subscriber_id <> channel_id", name="ck_subscription_not_self"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    subscriber_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)
    channel_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)

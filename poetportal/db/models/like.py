import enum
from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from poetportal.db.base import Base


class LikeTarget(str, enum.Enum):
    post = "post"
    comment = "comment"


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("user_id", "target_type", "target_id", name="uq_like_user_target"),
        Index("ix_likes_target", "target_type", "target_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    target_type = Column(Enum(LikeTarget, name="like_target"), nullable=False)
    target_id = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User")

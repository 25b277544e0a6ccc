import logging
from typing import Tuple
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from poetportal.core.errors import AlreadyLiked, NotFound, NotLiked, SelfLike
from poetportal.db.models.comment import Comment
from poetportal.db.models.like import Like, LikeTarget
from poetportal.db.models.post import Post

TARGET_MODELS = {
    LikeTarget.post: Post,
    LikeTarget.comment: Comment,
}


def get_target(db: Session, target_type: LikeTarget, target_id: int):
    target = db.get(TARGET_MODELS[LikeTarget(target_type)], target_id)
    if target is None:
        raise NotFound(f"{LikeTarget(target_type).value.capitalize()} not found")
    return target


def _existing(db: Session, user_id: int, target_type: LikeTarget, target_id: int):
    return db.query(Like).filter(
        Like.user_id == user_id,
        Like.target_type == target_type,
        Like.target_id == target_id,
    ).first()


def like(db: Session, user_id: int, target_type: LikeTarget, target_id: int) -> Like:
    target_type = LikeTarget(target_type)
    target = get_target(db, target_type, target_id)
    if target.user_id == user_id:
        raise SelfLike()
    if _existing(db, user_id, target_type, target_id) is not None:
        raise AlreadyLiked()

    new_like = Like(user_id=user_id, target_type=target_type, target_id=target_id)
    try:
        db.add(new_like)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyLiked()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(new_like)
    return new_like


def unlike(db: Session, user_id: int, target_type: LikeTarget, target_id: int) -> None:
    target_type = LikeTarget(target_type)
    try:
        removed = db.query(Like).filter(
            Like.user_id == user_id,
            Like.target_type == target_type,
            Like.target_id == target_id,
        ).delete(synchronize_session=False)
        if not removed:
            db.rollback()
            raise NotLiked()
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def like_count(db: Session, target_type: LikeTarget, target_id: int) -> int:
    return db.query(func.count(Like.id)).filter(
        Like.target_type == LikeTarget(target_type),
        Like.target_id == target_id,
    ).scalar() or 0


def user_has_liked(db: Session, user_id: int, target_type: LikeTarget, target_id: int) -> bool:
    return _existing(db, user_id, LikeTarget(target_type), target_id) is not None


def toggle_like(db: Session, user_id: int, target_type: LikeTarget, target_id: int) -> Tuple[bool, int]:
    """Like the target, or remove the like if the user already has one."""
    if user_has_liked(db, user_id, target_type, target_id):
        unlike(db, user_id, target_type, target_id)
        liked = False
    else:
        like(db, user_id, target_type, target_id)
        liked = True
    logging.info(f"User {user_id} {'liked' if liked else 'unliked'} {LikeTarget(target_type).value} {target_id}")
    return liked, like_count(db, target_type, target_id)

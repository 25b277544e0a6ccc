import logging
from typing import List
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from poetportal.core.errors import AlreadyFollowing, NotFollowing, SelfFollow
from poetportal.db.models.follow import Follow
from poetportal.crud.user import get_user
from poetportal.db.models.user import User


def _edge(db: Session, follower_id: int, followed_id: int):
    return db.query(Follow).filter(
        Follow.follower_id == follower_id,
        Follow.followed_id == followed_id,
    ).first()


def follow(db: Session, follower_id: int, followed_id: int) -> Follow:
    if follower_id == followed_id:
        raise SelfFollow()
    get_user(db, followed_id)

    if _edge(db, follower_id, followed_id) is not None:
        raise AlreadyFollowing()

    edge = Follow(follower_id=follower_id, followed_id=followed_id)
    try:
        db.add(edge)
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same pair first
        db.rollback()
        raise AlreadyFollowing()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(edge)
    logging.info(f"User {follower_id} followed user {followed_id}")
    return edge


def unfollow(db: Session, follower_id: int, followed_id: int) -> None:
    try:
        removed = db.query(Follow).filter(
            Follow.follower_id == follower_id,
            Follow.followed_id == followed_id,
        ).delete(synchronize_session=False)
        if not removed:
            db.rollback()
            raise NotFollowing()
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logging.info(f"User {follower_id} unfollowed user {followed_id}")


def is_following(db: Session, follower_id: int, followed_id: int) -> bool:
    return _edge(db, follower_id, followed_id) is not None


def followers_of(db: Session, user_id: int) -> List[User]:
    get_user(db, user_id)
    return db.query(User)\
        .join(Follow, Follow.follower_id == User.id)\
        .filter(Follow.followed_id == user_id)\
        .order_by(Follow.created_at.asc(), Follow.id.asc())\
        .all()


def following_of(db: Session, user_id: int) -> List[User]:
    get_user(db, user_id)
    return db.query(User)\
        .join(Follow, Follow.followed_id == User.id)\
        .filter(Follow.follower_id == user_id)\
        .order_by(Follow.created_at.asc(), Follow.id.asc())\
        .all()

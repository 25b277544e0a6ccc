import logging
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from poetportal.core.errors import EmptyContent, NotFound
from poetportal.core.security import require_ownership
from poetportal.db.models.comment import Comment
from poetportal.db.models.like import Like, LikeTarget
from poetportal.db.models.post import Post, TITLE_MAX_LENGTH
from poetportal.db.models.user import User


def derive_title(content: str) -> str:
    """First line of the content, cut to the title column width."""
    first_line = content.strip().splitlines()[0]
    return first_line.strip()[:TITLE_MAX_LENGTH]


def get_post(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFound("Post not found")
    return post


def create_post(db: Session, owner_id: int, content: str) -> Post:
    if content is None or not content.strip():
        raise EmptyContent("Post content is required")

    new_post = Post(
        user_id=owner_id,
        title=derive_title(content),
        content=content,
    )
    try:
        db.add(new_post)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(new_post)
    logging.info(f"User {owner_id} created post {new_post.id}")
    return new_post


def delete_post(db: Session, post_id: int, requester: User) -> None:
    post = get_post(db, post_id)
    require_ownership(requester, post.user_id)

    thread_ids = select(Comment.id).where(Comment.post_id == post.id)
    try:
        db.query(Like).filter(
            Like.target_type == LikeTarget.post,
            Like.target_id == post.id,
        ).delete(synchronize_session=False)
        db.query(Like).filter(
            Like.target_type == LikeTarget.comment,
            Like.target_id.in_(thread_ids),
        ).delete(synchronize_session=False)
        removed = db.query(Comment).filter(Comment.post_id == post.id).delete(synchronize_session=False)
        db.delete(post)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logging.info(f"User {requester.id} deleted post {post_id} with {removed} comments")

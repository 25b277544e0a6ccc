import logging
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from poetportal.core.errors import EmptyContent, InvalidParent, NotFound
from poetportal.core.security import require_ownership
from poetportal.crud.engagement import collect_subtree
from poetportal.crud.post import get_post
from poetportal.db.models.comment import Comment
from poetportal.db.models.like import Like, LikeTarget
from poetportal.db.models.user import User


def get_comment(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFound("Comment not found")
    return comment


def create_comment(
    db: Session,
    owner_id: int,
    post_id: int,
    content: str,
    parent_id: Optional[int] = None,
) -> Comment:
    post = get_post(db, post_id)
    if content is None or not content.strip():
        raise EmptyContent("Comment content is required")

    if parent_id is not None:
        parent = db.get(Comment, parent_id)
        # A reply must stay inside the thread of its own post
        if parent is None or parent.post_id != post.id:
            raise InvalidParent()

    comment = Comment(
        post_id=post.id,
        user_id=owner_id,
        parent_id=parent_id,
        content=content,
    )
    try:
        db.add(comment)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(comment)
    return comment


def delete_comment(db: Session, comment_id: int, requester: User) -> None:
    comment = get_comment(db, comment_id)
    require_ownership(requester, comment.user_id)

    thread = db.query(Comment).filter(Comment.post_id == comment.post_id).all()
    doomed = collect_subtree(thread, comment.id)
    try:
        db.query(Like).filter(
            Like.target_type == LikeTarget.comment,
            Like.target_id.in_(doomed),
        ).delete(synchronize_session=False)
        db.query(Comment).filter(Comment.id.in_(doomed)).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logging.info(f"User {requester.id} deleted comment {comment_id} and {len(doomed) - 1} replies")

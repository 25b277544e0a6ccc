import logging
from fastapi import APIRouter, Depends
from typing import List, Optional
from sqlalchemy.orm import Session
from poetportal.core.security import get_current_user, get_optional_user
from poetportal.crud import comment as comment_crud, engagement, post as crud
from poetportal.db.models.user import User
from poetportal.db.session import get_db
from poetportal.schemas.comment import CommentCreate, CommentOut
from poetportal.schemas.post import PostCreate, PostOut, PostView

router = APIRouter()

@router.get("", response_model=List[PostView])
def get_posts(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    return engagement.list_posts_with_engagement(db, current_user.id if current_user else None)


@router.post("", response_model=PostOut)
def create_post(
    post_in: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return crud.create_post(db, current_user.id, post_in.content)


@router.get("/{post_id}", response_model=PostView)
def get_post_by_id(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    return engagement.get_post_with_engagement(db, post_id, current_user.id if current_user else None)

#delete post together with its comments and likes
@router.delete("/{post_id}")
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    post = PostOut.model_validate(crud.get_post(db, post_id))
    crud.delete_post(db, post_id, current_user)
    return {"msg": "Post deleted successfully", "post": post}


@router.post("/{post_id}/comments", response_model=CommentOut)
def create_comment(
    post_id: int,
    comment_in: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    comment = comment_crud.create_comment(
        db, current_user.id, post_id, comment_in.content, comment_in.parent_id
    )
    logging.info(f"User {current_user.id} commented {comment.id} on post {post_id}")
    return comment

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from poetportal.core.security import get_current_user
from poetportal.crud import engagement, follow as crud
from poetportal.crud.user import get_user
from poetportal.db.models.user import User
from poetportal.db.session import get_db
from poetportal.schemas.follow import FollowStatus
from poetportal.schemas.user import UserSummary

router = APIRouter()

# Follow a user
@router.post("/{user_id}/follow", response_model=FollowStatus)
def follow_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    crud.follow(db, current_user.id, user_id)
    return engagement.follow_relationship(db, current_user.id, user_id)

# Unfollow a user
@router.delete("/{user_id}/follow", response_model=FollowStatus)
def unfollow_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    crud.unfollow(db, current_user.id, user_id)
    return engagement.follow_relationship(db, current_user.id, user_id)


# Whether the caller follows this user, plus the user's counts
@router.get("/{user_id}/follow-status", response_model=FollowStatus)
def get_follow_status(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_user(db, user_id)
    return engagement.follow_relationship(db, current_user.id, user_id)


@router.get("/{user_id}/followers", response_model=List[UserSummary])
def get_followers(user_id: int, db: Session = Depends(get_db)):
    return crud.followers_of(db, user_id)


@router.get("/{user_id}/following-list", response_model=List[UserSummary])
def get_following(user_id: int, db: Session = Depends(get_db)):
    return crud.following_of(db, user_id)

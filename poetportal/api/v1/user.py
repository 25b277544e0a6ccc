from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from poetportal.core.security import get_optional_user
from poetportal.crud import engagement
from poetportal.crud.user import get_user, list_users
from poetportal.db.models.user import User
from poetportal.db.session import get_db
from poetportal.schemas.user import UserProfile, UserSummary


router = APIRouter()


@router.get("", response_model=List[UserSummary])
def get_users(db: Session = Depends(get_db)):
    return list_users(db)


# Public profile with post and follow counts
@router.get("/{user_id}", response_model=UserProfile)
def get_user_profile(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    user = get_user(db, user_id)
    return engagement.user_profile(db, user, current_user.id if current_user else None)

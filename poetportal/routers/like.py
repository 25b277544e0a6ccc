from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from poetportal.core.security import get_current_user
from poetportal.crud import like as crud
from poetportal.db.models.user import User
from poetportal.db.session import get_db
from poetportal.schemas.like import LikeRequest, LikeStatus

router = APIRouter()

@router.post("", response_model=LikeStatus)
def toggle_like(
    like_in: LikeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    liked, count = crud.toggle_like(db, current_user.id, like_in.target_type, like_in.target_id)
    return LikeStatus(liked=liked, count=count)

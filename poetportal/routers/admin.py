from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from poetportal.core.security import get_current_admin
from poetportal.crud import user as crud
from poetportal.db.models.user import User
from poetportal.db.session import get_db
from poetportal.schemas.user import AdminUserUpdate, SuspendRequest, UserOut
from typing import List


router = APIRouter()

#get all users, admins included
@router.get("/users", response_model=List[UserOut])
def get_all_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return crud.list_users(db)


#edit username, display name or bio of any user
@router.put("/users/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    update: AdminUserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return crud.admin_update_user(db, user_id, update)


#suspend or reinstate a user; takes effect on their next request
@router.post("/users/{user_id}/suspend", response_model=UserOut)
def suspend_user(
    user_id: int,
    body: SuspendRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return crud.set_suspended(db, current_user, user_id, body.suspended)

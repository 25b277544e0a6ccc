from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from poetportal.core.security import get_current_user
from poetportal.crud import comment as crud
from poetportal.db.models.user import User
from poetportal.db.session import get_db
from poetportal.schemas.comment import CommentOut

router = APIRouter()

# Deleting a comment also removes every reply below it
@router.delete("/{comment_id}")
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    comment = CommentOut.model_validate(crud.get_comment(db, comment_id))
    crud.delete_comment(db, comment_id, current_user)
    return {"msg": "Comment deleted successfully", "comment": comment}

import logging
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from cloudinary.exceptions import Error as CloudinaryError
from poetportal.core import config, storage
from poetportal.core.security import create_access_token, get_current_user
from poetportal.crud import user as crud
from poetportal.db.models.user import User
from poetportal.db.session import get_db
from poetportal.schemas.token import Token
from poetportal.schemas.user import UserCreate, UserLogin, UserOut, UserUpdate


router = APIRouter()


@router.post("/register", response_model=Token)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    new_user = crud.create_user(db, user_in)
    return Token(token=create_access_token(new_user), user=UserOut.model_validate(new_user))


@router.post("/login", response_model=Token)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = crud.authenticate_user(db, credentials.username, credentials.password)
    logging.info(f"Login successful for user {user.username}")
    return Token(token=create_access_token(user), user=UserOut.model_validate(user))


# Tokens are stateless; the client drops its copy
@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    return {"message": "Logout successful"}


@router.get("/user", response_model=UserOut)
def get_user_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/user", response_model=UserOut)
def update_user_me(
    update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return crud.update_profile(db, current_user, update)


@router.put("/user/avatar", response_model=UserOut)
async def update_avatar(
    avatar: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if avatar.content_type not in config.AVATAR_CONTENT_TYPES:
        raise HTTPException(400, "Invalid image format")
    data = await avatar.read()
    if not data:
        raise HTTPException(400, "No file provided")
    if len(data) > config.AVATAR_MAX_BYTES:
        raise HTTPException(400, "File too large (max 5MB)")

    try:
        stored = storage.upload_avatar(data, current_user.id)
    except CloudinaryError as e:
        logging.error(f"Cloudinary Error: {str(e)}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Image upload failed")

    old_public_id = current_user.avatar_public_id
    current_user.avatar_url = stored["url"]
    current_user.avatar_public_id = stored["public_id"]
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        # Cleanup uploaded image if database operation failed
        storage.destroy_avatar(stored["public_id"])
        raise
    db.refresh(current_user)

    # Delete old image after successful update
    if old_public_id:
        storage.destroy_avatar(old_public_id)
    return current_user

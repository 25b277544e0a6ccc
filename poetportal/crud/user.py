import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from poetportal.core.errors import AccountSuspended, NotFound, Unauthenticated, UsernameTaken, ValidationFailed
from poetportal.core.security import hash_password, verify_password
from poetportal.db.models.user import User
from poetportal.schemas.user import AdminUserUpdate, UserCreate, UserUpdate


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.id.asc()).all()


def _commit_user(db: Session, user: User) -> User:
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        # Unique index on username is the final word on duplicates
        db.rollback()
        raise UsernameTaken()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)
    return user


def create_user(db: Session, user_in: UserCreate, is_admin: bool = False) -> User:
    if get_user_by_username(db, user_in.username):
        raise UsernameTaken()
    new_user = User(
        username=user_in.username,
        password=hash_password(user_in.password),
        display_name=user_in.display_name,
        is_admin=is_admin,
        is_suspended=False,
    )
    user = _commit_user(db, new_user)
    logging.info(f"Registered user {user.username} ({user.id})")
    return user


def authenticate_user(db: Session, username: str, password: str) -> User:
    user = get_user_by_username(db, username)
    if user is None or not verify_password(password, user.password):
        logging.warning(f"Failed login for username {username!r}")
        raise Unauthenticated("Incorrect username or password")
    if user.is_suspended:
        logging.warning(f"Suspended user {username!r} attempted to log in")
        raise AccountSuspended()
    return user


def update_profile(db: Session, user: User, update: UserUpdate) -> User:
    for key, value in update.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    return _commit_user(db, user)


def admin_update_user(db: Session, user_id: int, update: AdminUserUpdate) -> User:
    user = get_user(db, user_id)
    update_data = update.model_dump(exclude_unset=True)
    if update_data.get("username") is None:
        update_data.pop("username", None)
    elif update_data["username"] != user.username and get_user_by_username(db, update_data["username"]):
        raise UsernameTaken()
    for key, value in update_data.items():
        setattr(user, key, value)
    return _commit_user(db, user)


def set_suspended(db: Session, admin: User, user_id: int, suspended: bool) -> User:
    if admin.id == user_id:
        raise ValidationFailed("You cannot change your own suspension status")
    user = get_user(db, user_id)
    user.is_suspended = suspended
    user = _commit_user(db, user)
    logging.info(f"Admin {admin.id} set suspended={suspended} on user {user_id}")
    return user

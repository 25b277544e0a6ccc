from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional

class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    display_name: Optional[str] = Field(None, max_length=100)

class UserLogin(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserSummary(BaseModel):
    id: int
    username: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True

class UserOut(UserSummary):
    bio: Optional[str] = None
    is_admin: bool
    is_suspended: bool
    created_at: datetime

    class Config:
        from_attributes = True

class UserProfile(UserOut):
    posts_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    is_following: Optional[bool] = None


class UserUpdate(BaseModel):
    display_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = None

class AdminUserUpdate(UserUpdate):
    username: Optional[str] = Field(None, min_length=3, max_length=50)

class SuspendRequest(BaseModel):
    suspended: bool

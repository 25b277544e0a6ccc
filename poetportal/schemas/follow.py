from datetime import datetime
from pydantic import BaseModel

class FollowOut(BaseModel):
    follower_id: int
    followed_id: int
    created_at: datetime

    class Config:
        from_attributes = True

class FollowStatus(BaseModel):
    is_following: bool
    followers_count: int
    following_count: int

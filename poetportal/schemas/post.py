from pydantic import BaseModel
from datetime import datetime
from typing import List
from poetportal.schemas.comment import CommentNode
from poetportal.schemas.user import UserSummary

class PostCreate(BaseModel):
    content: str

class PostOut(BaseModel):
    id: int
    user_id: int
    title: str
    content: str
    created_at: datetime

    class Config:
        from_attributes = True

class PostView(PostOut):
    author: UserSummary
    like_count: int = 0
    liked_by_me: bool = False
    comment_count: int = 0
    comments: List[CommentNode] = []

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from poetportal.schemas.user import UserSummary


class CommentCreate(BaseModel):
    content: str
    parent_id: Optional[int] = Field(None, alias="parentId")

    class Config:
        populate_by_name = True


class CommentOut(BaseModel):
    id: int
    post_id: int
    user_id: int
    parent_id: Optional[int] = None
    content: str
    created_at: datetime

    class Config:
        from_attributes = True


class CommentNode(CommentOut):
    """One comment in a post's thread, with its replies nested below it."""

    author: Optional[UserSummary] = None
    depth: int = 0
    can_reply: bool = True
    like_count: int = 0
    liked_by_me: bool = False
    replies: List["CommentNode"] = []


CommentNode.model_rebuild()

from pydantic import BaseModel, Field
from poetportal.db.models.like import LikeTarget


class LikeRequest(BaseModel):
    target_type: LikeTarget = Field(..., alias="targetType")
    target_id: int = Field(..., alias="targetId")

    class Config:
        populate_by_name = True


class LikeStatus(BaseModel):
    liked: bool
    count: int

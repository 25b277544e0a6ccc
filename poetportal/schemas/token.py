from pydantic import BaseModel
from poetportal.schemas.user import UserOut


class Token(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut


class TokenData(BaseModel):
    user_id: int
    username: str
    is_admin: bool = False

from datetime import datetime
from pydantic import BaseModel, EmailStr

class UserLogin(BaseModel):
    email: EmailStr
    name: str | None = None
    photo_url: str | None = None

class UpsertResult(BaseModel):
    email: EmailStr
    created: bool

class RoleOut(BaseModel):
    role: str | None

class UserOut(BaseModel):
    id: int
    email: EmailStr
    name: str | None
    photo_url: str | None
    role: str
    is_fraud: bool
    created_at: datetime
    last_logged_in: datetime

    class Config:
        from_attributes = True

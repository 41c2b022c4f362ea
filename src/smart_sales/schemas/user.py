from pydantic import BaseModel, Field
from datetime import datetime

from smart_sales.models.user import RoleEnum


class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6)


class UserLogin(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    id: str
    email: str
    role: RoleEnum
    created_at: datetime

    class Config:
        from_attributes = True


class LoginResult(BaseModel):
    user: UserOut
    redirect_to: str

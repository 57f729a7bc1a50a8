# File: taskmaster/schemas/user.py

from pydantic import BaseModel, EmailStr

from taskmaster.models.user import UserRole


class UserBase(BaseModel):
    email: EmailStr


class UserCreate(UserBase):
    username: str
    password: str


class UserLogin(BaseModel):
    email: str
    password: str


class UserRead(UserBase):
    id: int
    username: str
    role: UserRole

    class Config:
        from_attributes = True  # Pydantic v2: replaces orm_mode


class AuthResponse(BaseModel):
    message: str
    user: UserRead

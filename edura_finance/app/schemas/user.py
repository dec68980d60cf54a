"""User schemas used for registration and responses."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# Managers are never self-registered; see ManagerCreate.
SelfServiceRole = Literal["teacher", "student"]


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None
    role: SelfServiceRole = "student"


class ManagerCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    full_name: str = Field(min_length=2)
    secret_key: str


class UserRead(BaseModel):
    id: int
    email: EmailStr
    full_name: Optional[str] = None
    role: str

    model_config = ConfigDict(from_attributes=True)


class TokenRead(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str

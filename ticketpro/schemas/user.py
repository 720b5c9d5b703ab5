from pydantic import BaseModel, Field
from typing import Literal, Optional

RoleName = Literal["admin", "manager", "staff"]
UserStatus = Literal["active", "inactive"]


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=80)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    role: RoleName
    email: Optional[str] = None
    phone: Optional[str] = None
    status: UserStatus = "active"


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[RoleName] = None
    status: Optional[UserStatus] = None
    password: Optional[str] = Field(default=None, min_length=6)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None


class PasswordChange(BaseModel):
    currentPassword: str
    newPassword: str = Field(min_length=6)

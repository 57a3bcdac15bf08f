"""
Request/response schemas for authentication and account management
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from halloffame.orm.user import UserRole


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class UserInfo(BaseModel):
    id: int
    username: str
    role: UserRole


class LoginResponse(BaseModel):
    token: str
    user: UserInfo


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    role: UserRole


class RegisterResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    user_id: int = Field(..., serialization_alias="userId")


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword")


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: UserRole
    created_at: datetime


class CommitteeMember(BaseModel):
    name: Optional[str] = None
    username: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = None


class SetupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    setup_key: str = Field(..., alias="setupKey")
    admin_username: str = Field(..., alias="adminUsername", min_length=1, max_length=100)
    admin_password: str = Field(..., alias="adminPassword", min_length=1)
    committee_members: List[CommitteeMember] = Field(default_factory=list, alias="committeeMembers")


class IssuedCredential(BaseModel):
    name: Optional[str] = None
    username: str
    password: str
    email: Optional[str] = None
    role: UserRole


class SetupResponse(BaseModel):
    message: str
    credentials: List[IssuedCredential]
    warning: str = "Save these credentials securely!"

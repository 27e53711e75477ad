from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from alaya.domain.users.entities import User


class CredentialsRequestDTO(BaseModel):
    username: str = Field(max_length=255)
    password: str = Field(max_length=1024)

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        return value.strip()


class LoginResponseDTO(BaseModel):
    token: str | None = None


class UserInfoDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserInfoDTO:
        return cls.model_validate(user)


class UserListDTO(BaseModel):
    count: int
    users: list[UserInfoDTO]

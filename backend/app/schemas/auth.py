from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, constr, field_validator
from pydantic.alias_generators import to_camel

from app.utils.time import to_utc


class UserResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    email: str
    username: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return to_utc(value)


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


class RegisterRequest(BaseModel):
    email: constr(strip_whitespace=True, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    username: constr(strip_whitespace=True, min_length=1, max_length=64)
    password: constr(min_length=6)


class LoginRequest(BaseModel):
    email: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=1)

# vidtube/users/schemas.py
from datetime import datetime

from pydantic import EmailStr, Field, model_validator

from vidtube.core.schemas import CamelModel


class UserOut(CamelModel):
    id: int
    username: str
    email: EmailStr
    full_name: str
    avatar: str | None = None
    cover_image: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class RegisterIn(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$")
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class LoginIn(CamelModel):
    """Acepta email o username (uno de los dos) + password."""
    email: str | None = None
    username: str | None = None
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _need_identifier(self):
        if not (self.email or self.username):
            raise ValueError("username or email is required")
        return self


class RefreshIn(CamelModel):
    refresh_token: str | None = None


class ChangePasswordIn(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class UpdateDetailsIn(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$")


class AuthOut(CamelModel):
    user: UserOut
    access_token: str
    refresh_token: str


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class ChannelProfileOut(CamelModel):
    id: int
    username: str
    full_name: str
    avatar: str | None = None
    cover_image: str | None = None
    email: str | None = None
    subscribers_count: int = 0
    channels_subscribed_to_count: int = 0
    is_subscribed: bool = False
    created_at: datetime

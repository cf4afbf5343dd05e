"""Authenticated user session models."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    email: str | None = None
    created_at: datetime | None = None


class AuthSession(BaseModel):
    """Tokens returned by a successful password sign-in."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    user: AuthUser
    access_token: str
    refresh_token: str
    expires_at: int | None = None  # unix seconds


class LoginRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class SessionTokens(BaseModel):
    access_token: str
    refresh_token: str
    expires_at: int | None = None


class LoginResponse(BaseModel):
    user: AuthUser
    session: SessionTokens
    login_time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

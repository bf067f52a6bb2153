"""Auth application commands."""

from typing import Any

from pydantic import BaseModel, Field


class IssueTokenCommand(BaseModel):
    """Issue a token after a successful login."""

    username: str = Field(..., min_length=1)
    request_metadata: dict[str, Any] = Field(default_factory=dict)


class AuthenticateTokenCommand(BaseModel):
    """Resolve the login info behind a bearer token."""

    token: str

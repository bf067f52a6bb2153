"""Auth domain exceptions.

TokenService 本身从不抛出这些异常，只有应用层 handler 会把失败结果转换为异常。
"""

from src.core.domain.exceptions import DomainException
from src.modules.auth.domain.entities import TokenState


class TokenRejectedError(DomainException):
    """Raised when a token does not authenticate its bearer."""

    error_code = "TOKEN_REJECTED"

    def __init__(self, state: TokenState, reason: str = "Invalid token") -> None:
        self.state = state
        super().__init__(reason)


class LoginInfoNotFoundError(DomainException):
    """Raised when the token subject has no login info."""

    error_code = "LOGIN_INFO_NOT_FOUND"

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Login info for '{username}' not found")

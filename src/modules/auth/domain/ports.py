"""Auth module ports."""

from typing import Protocol


class LoginInfo(Protocol):
    """The identity record a token is checked against."""

    @property
    def username(self) -> str: ...


class LoginInfoProvider(Protocol):
    """Port for looking up login info by username."""

    async def get_by_username(self, username: str) -> LoginInfo | None:
        """Return the login info for ``username`` or ``None``."""
        ...

"""Token service port."""

from datetime import datetime
from typing import Protocol

from src.modules.auth.domain.entities import (
    ClaimsResult,
    DeviceClass,
    IssuedToken,
    TokenState,
)


class TokenService(Protocol):
    def issue(self, username: str, device_class: DeviceClass | str) -> str: ...

    def issue_token(
        self, username: str, device_class: DeviceClass | str
    ) -> IssuedToken: ...

    def parse_claims(self, token: str) -> ClaimsResult: ...

    def username_of(self, token: str) -> str | None: ...

    def expiration_of(self, token: str) -> datetime | None: ...

    def is_expired(self, token: str) -> bool: ...

    def validate(self, token: str, expected_username: str) -> bool: ...

    def inspect(self, token: str) -> TokenState: ...

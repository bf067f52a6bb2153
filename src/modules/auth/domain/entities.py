"""Auth domain entities: device classes, audiences and claim sets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CLAIM_KEY_USERNAME = "sub"
CLAIM_KEY_AUDIENCE = "audience"
CLAIM_KEY_CREATED = "created"
CLAIM_KEY_EXPIRATION = "exp"


class DeviceClass(StrEnum):
    """Client device class reported by the device classifier."""

    NORMAL = "normal"
    TABLET = "tablet"
    MOBILE = "mobile"
    OTHER = "other"


class Audience(StrEnum):
    """Coarse client type embedded in issued tokens."""

    WEB = "web"
    TABLET = "tablet"
    MOBILE = "mobile"
    UNKNOWN = "unknown"


_AUDIENCE_BY_DEVICE: dict[str, Audience] = {
    DeviceClass.NORMAL: Audience.WEB,  # PC 端
    DeviceClass.TABLET: Audience.TABLET,
    DeviceClass.MOBILE: Audience.MOBILE,
}


def audience_for(device_class: DeviceClass | str | None) -> Audience:
    """Map a device class to the audience claim; unrecognised input is ``unknown``."""
    if not isinstance(device_class, str):
        return Audience.UNKNOWN
    return _AUDIENCE_BY_DEVICE.get(device_class, Audience.UNKNOWN)


class TokenState(StrEnum):
    """Outcome of evaluating a token against the current time."""

    VALID = "valid"
    EXPIRED = "expired"
    MALFORMED = "malformed"


class ParseError(StrEnum):
    """Why a token could not be turned into a claim set."""

    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    INVALID_CLAIMS = "invalid_claims"


class ClaimSet(BaseModel):
    """Claims carried by a verified token."""

    model_config = ConfigDict(frozen=True)

    subject: str | None = Field(default=None, description="用户名 (sub)")
    audience: str | None = Field(default=None, description="访问端类型")
    created: datetime | None = Field(default=None, description="签发时间")
    expiration: datetime | None = Field(default=None, description="过期时间")

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ClaimSet:
        """Build a claim set from a decoded JWT payload.

        ``created`` is epoch milliseconds and ``exp`` epoch seconds.

        Raises:
            ValueError: a timestamp claim is present but not numeric.
        """
        subject = payload.get(CLAIM_KEY_USERNAME)
        audience = payload.get(CLAIM_KEY_AUDIENCE)
        return cls(
            subject=subject if isinstance(subject, str) else None,
            audience=audience if isinstance(audience, str) else None,
            created=_from_epoch(payload.get(CLAIM_KEY_CREATED), scale=1000),
            expiration=_from_epoch(payload.get(CLAIM_KEY_EXPIRATION), scale=1),
        )

    def is_expired_at(self, moment: datetime) -> bool:
        """Whether the token had expired at ``moment``; a missing expiration counts as expired."""
        if self.expiration is None:
            return True
        return self.expiration < moment


def _from_epoch(value: Any, scale: int) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"timestamp claim must be numeric, got {type(value).__name__}")
    return datetime.fromtimestamp(value / scale, UTC)


@dataclass(frozen=True)
class ClaimsResult:
    """Either a verified claim set or the reason verification failed."""

    claims: ClaimSet | None = None
    error: ParseError | None = None

    @classmethod
    def success(cls, claims: ClaimSet) -> ClaimsResult:
        return cls(claims=claims)

    @classmethod
    def failure(cls, error: ParseError) -> ClaimsResult:
        return cls(error=error)

    @property
    def is_valid(self) -> bool:
        return self.claims is not None


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed token together with the claims baked into it."""

    token: str
    subject: str
    audience: Audience
    created: datetime
    expires_at: datetime

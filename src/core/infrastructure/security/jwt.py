"""JWT token handling."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from loguru import logger

from src.core.config import Settings, settings
from src.core.domain.exceptions import ConfigurationError
from src.core.infrastructure.logging import BusinessEvents
from src.modules.auth.domain.entities import (
    CLAIM_KEY_AUDIENCE,
    CLAIM_KEY_CREATED,
    CLAIM_KEY_EXPIRATION,
    CLAIM_KEY_USERNAME,
    ClaimSet,
    ClaimsResult,
    DeviceClass,
    IssuedToken,
    ParseError,
    TokenState,
    audience_for,
)

HMAC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


@dataclass(frozen=True)
class JwtConfig:
    """Immutable signing configuration, built once at startup.

    Raises:
        ConfigurationError: empty secret, non-positive lifetime, a non-HMAC
            algorithm, or a base64 secret that cannot be decoded.
    """

    secret: str
    expiration_seconds: int
    algorithm: str = "HS512"
    secret_is_base64: bool = False

    def __post_init__(self) -> None:
        if not self.secret:
            raise ConfigurationError("JWT secret must not be empty")
        if isinstance(self.expiration_seconds, bool) or not isinstance(
            self.expiration_seconds, int
        ):
            raise ConfigurationError("JWT expiration must be an integer number of seconds")
        if self.expiration_seconds <= 0:
            raise ConfigurationError(
                f"JWT expiration must be positive, got {self.expiration_seconds}"
            )
        if self.algorithm not in HMAC_ALGORITHMS:
            raise ConfigurationError(f"Unsupported JWT algorithm: {self.algorithm}")
        # 提前解码一次，让无效的 base64 secret 在启动时暴露
        _ = self.signing_key

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> JwtConfig:
        source = source if source is not None else settings
        return cls(
            secret=source.JWT_SECRET,
            expiration_seconds=source.JWT_EXPIRATION_SECONDS,
            algorithm=source.JWT_ALGORITHM,
            secret_is_base64=source.JWT_SECRET_BASE64,
        )

    @property
    def signing_key(self) -> bytes:
        if not self.secret_is_base64:
            return self.secret.encode("utf-8")
        try:
            key = base64.b64decode(self.secret)
        except (binascii.Error, ValueError) as e:
            raise ConfigurationError(f"JWT secret is not valid base64: {e}") from e
        if not key:
            raise ConfigurationError("JWT secret decodes to an empty key")
        return key

    @property
    def lifetime(self) -> timedelta:
        return timedelta(seconds=self.expiration_seconds)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JWTTokenService:
    """Token service implementation using JWT.

    All methods are pure functions of (token, config, clock); the instance
    holds no mutable state and can be shared between threads.
    """

    def __init__(
        self,
        config: JwtConfig,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config
        self._clock = clock or _utcnow
        self.logger = logger

    @property
    def config(self) -> JwtConfig:
        return self._config

    def issue(self, username: str, device_class: DeviceClass | str) -> str:
        """Create a signed token for ``username``."""
        return self.issue_token(username, device_class).token

    def issue_token(self, username: str, device_class: DeviceClass | str) -> IssuedToken:
        """Create a signed token and return it with the claims it carries.

        expiration = created + expiration_seconds
        """
        created = self._clock()
        expires_at = created + self._config.lifetime
        audience = audience_for(device_class)

        to_encode = {
            CLAIM_KEY_USERNAME: username,
            CLAIM_KEY_AUDIENCE: audience.value,
            CLAIM_KEY_CREATED: int(created.timestamp() * 1000),
            CLAIM_KEY_EXPIRATION: int(expires_at.timestamp()),
        }
        token = jwt.encode(
            to_encode, self._config.signing_key, algorithm=self._config.algorithm
        )

        BusinessEvents.token_issued(
            subject=username, audience=audience.value, expires_at=expires_at
        )
        return IssuedToken(
            token=token,
            subject=username,
            audience=audience,
            created=created,
            expires_at=expires_at,
        )

    def parse_claims(self, token: str) -> ClaimsResult:
        """Verify signature and algorithm, then decode the claim set.

        Expiry is not checked here: an authentic but expired token still
        yields its claims so callers can report when it expired.
        """
        if not token or not isinstance(token, str):
            return self._reject(ParseError.MALFORMED, "empty token")

        try:
            payload = jwt.decode(
                token,
                self._config.signing_key,
                algorithms=[self._config.algorithm],
                options={"verify_exp": False},
            )
        except jwt.InvalidSignatureError:
            return self._reject(ParseError.BAD_SIGNATURE, "signature mismatch")
        except jwt.InvalidAlgorithmError as e:
            return self._reject(ParseError.UNSUPPORTED_ALGORITHM, str(e))
        except jwt.DecodeError as e:
            return self._reject(ParseError.MALFORMED, str(e))
        except jwt.InvalidTokenError as e:
            return self._reject(ParseError.INVALID_CLAIMS, str(e))

        try:
            claims = ClaimSet.from_payload(payload)
        except (ValueError, OverflowError, OSError) as e:
            return self._reject(ParseError.INVALID_CLAIMS, str(e))
        return ClaimsResult.success(claims)

    def username_of(self, token: str) -> str | None:
        result = self.parse_claims(token)
        if result.claims is None:
            return None
        return result.claims.subject

    def expiration_of(self, token: str) -> datetime | None:
        result = self.parse_claims(token)
        if result.claims is None:
            return None
        return result.claims.expiration

    def is_expired(self, token: str) -> bool:
        """Whether ``token`` is past its expiration.

        Unparsable tokens and tokens without ``exp`` count as expired.
        """
        expiration = self.expiration_of(token)
        if expiration is None:
            return True
        return expiration < self._clock()

    def validate(self, token: str, expected_username: str) -> bool:
        """校验 token：签名正确、用户名一致且未过期。"""
        result = self.parse_claims(token)
        if result.claims is None:
            return False

        claims = result.claims
        if claims.subject is None or claims.subject != expected_username:
            BusinessEvents.token_validation_failed(
                subject=claims.subject, reason="subject_mismatch"
            )
            return False
        if claims.is_expired_at(self._clock()):
            BusinessEvents.token_validation_failed(
                subject=claims.subject, reason="expired"
            )
            return False
        return True

    def inspect(self, token: str) -> TokenState:
        """Classify ``token`` as valid, expired or malformed."""
        result = self.parse_claims(token)
        if result.claims is None:
            return TokenState.MALFORMED
        if result.claims.is_expired_at(self._clock()):
            return TokenState.EXPIRED
        return TokenState.VALID

    def _reject(self, error: ParseError, detail: str) -> ClaimsResult:
        self.logger.debug(f"Invalid token ({error}): {detail}")
        BusinessEvents.token_rejected(reason=error.value)
        return ClaimsResult.failure(error)


def get_token_service() -> JWTTokenService:
    """Get token service instance."""
    return JWTTokenService(JwtConfig.from_settings())

"""Application configuration."""

import secrets
import warnings
from typing import Literal, Self

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "jwtHelper"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # JWT
    JWT_SECRET: str = secrets.token_urlsafe(64)
    # 旧部署里 JJWT 的 signWith(alg, String) 会把 secret 当作 base64 解码
    JWT_SECRET_BASE64: bool = False
    JWT_EXPIRATION_SECONDS: int = 60 * 60 * 24 * 7  # 7 days
    JWT_ALGORITHM: Literal["HS256", "HS384", "HS512"] = "HS512"

    def _check_default_secret(self, var_name: str, value: str | None) -> None:
        if value == "changethis":
            message = (
                f'The value of {var_name} is "changethis", '
                "for security, please change it, at least for deployments."
            )
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> Self:
        self._check_default_secret("JWT_SECRET", self.JWT_SECRET)
        return self


settings = Settings()

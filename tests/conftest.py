"""
pytest 配置和共享 fixtures。

使用方法：
    # 运行所有测试
    uv run pytest

    # 只运行单元测试
    uv run pytest tests/unit/
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from src.core.config import Settings
from src.core.infrastructure.security.jwt import JwtConfig, JWTTokenService

TEST_SECRET = "test-secret-key-for-testing-only-" + "x" * 48
OTHER_SECRET = "another-secret-key-for-testing-only-" + "y" * 48

ISSUED_AT = datetime(2026, 1, 6, 9, 0, 0, tzinfo=UTC)


# ============================================
# 配置 Fixtures
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def test_settings() -> Settings:
    """测试环境配置。"""
    return Settings(
        ENVIRONMENT="local",
        JWT_SECRET=TEST_SECRET,
        JWT_EXPIRATION_SECONDS=3600,
    )


@pytest.fixture
def other_secret() -> str:
    return OTHER_SECRET


@pytest.fixture
def jwt_config(test_settings: Settings) -> JwtConfig:
    return JwtConfig.from_settings(test_settings)


# ============================================
# 时间控制 Fixtures
# ============================================


class FixedClock:
    """可手动拨动的时钟（用于测试过期逻辑）。"""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(ISSUED_AT)


@pytest.fixture
def token_service(jwt_config: JwtConfig) -> JWTTokenService:
    """使用真实时钟的 token service。"""
    return JWTTokenService(jwt_config)


@pytest.fixture
def clocked_service(
    jwt_config: JwtConfig, fixed_clock: FixedClock
) -> JWTTokenService:
    """使用固定时钟的 token service。"""
    return JWTTokenService(jwt_config, clock=fixed_clock)


@pytest.fixture
def service_factory() -> Callable[..., JWTTokenService]:
    """按需构造不同 secret / lifetime 的 service。"""

    def _factory(
        secret: str = TEST_SECRET,
        expiration_seconds: int = 3600,
        clock: Callable[[], datetime] | None = None,
        **kwargs: object,
    ) -> JWTTokenService:
        config = JwtConfig(
            secret=secret, expiration_seconds=expiration_seconds, **kwargs
        )
        return JWTTokenService(config, clock=clock)

    return _factory

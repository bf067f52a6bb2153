"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件（签发 / 拒绝 token）的结构化日志
"""

import sys
from datetime import datetime
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """配置 structlog 处理器链。"""
    if settings.ENVIRONMENT == "local":
        # 本地开发使用人类可读格式
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/jwthelper_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class BusinessEvents:
    """业务事件日志助手类。

    token 原文和签名密钥永远不会写入日志。
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def token_issued(
        cls,
        subject: str,
        audience: str,
        expires_at: datetime,
        **extra: Any,
    ) -> None:
        """记录 token 签发事件。"""
        cls._log.info(
            "token_issued",
            event_type="token",
            subject=subject,
            audience=audience,
            expires_at=expires_at.isoformat(),
            **extra,
        )

    @classmethod
    def token_rejected(
        cls,
        reason: str,
        **extra: Any,
    ) -> None:
        """记录 token 解析失败事件。"""
        cls._log.warning(
            "token_rejected",
            event_type="token_error",
            reason=reason,
            **extra,
        )

    @classmethod
    def token_validation_failed(
        cls,
        subject: str | None,
        reason: str,
        **extra: Any,
    ) -> None:
        """记录 token 校验未通过事件（用户名不匹配 / 已过期）。"""
        cls._log.warning(
            "token_validation_failed",
            event_type="token_error",
            subject=subject,
            reason=reason,
            **extra,
        )

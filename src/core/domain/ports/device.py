"""Device classification port."""

from collections.abc import Mapping
from typing import Any, Protocol

from src.modules.auth.domain.entities import DeviceClass


class DeviceClassifier(Protocol):
    """Port for deciding which kind of client sent a request.

    实现方（如 User-Agent 解析）由调用方提供，本服务不做设备识别。
    """

    def classify_device(self, request_metadata: Mapping[str, Any]) -> DeviceClass:
        """Classify the client behind ``request_metadata``."""
        ...

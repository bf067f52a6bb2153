"""Base domain exceptions.

所有领域异常都应继承自 DomainException，并通过 error_code 类属性标识错误类型。
"""


class DomainException(Exception):
    """Base exception for all domain errors.

    子类可以通过定义 error_code 类属性来自定义错误代码（默认 "DOMAIN_ERROR"）。
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "A domain error occurred"):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(DomainException):
    """Raised at startup when the token configuration is unusable."""

    error_code = "CONFIGURATION_ERROR"

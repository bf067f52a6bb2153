"""Auth command handlers."""

from loguru import logger

from src.core.domain.ports.device import DeviceClassifier
from src.core.domain.ports.token import TokenService
from src.modules.auth.application.commands import (
    AuthenticateTokenCommand,
    IssueTokenCommand,
)
from src.modules.auth.domain.entities import IssuedToken, TokenState
from src.modules.auth.domain.exceptions import (
    LoginInfoNotFoundError,
    TokenRejectedError,
)
from src.modules.auth.domain.ports import LoginInfo, LoginInfoProvider


class IssueTokenHandler:
    """Handle token issuance for a logged-in user."""

    def __init__(
        self,
        token_service: TokenService,
        device_classifier: DeviceClassifier,
    ):
        self.token_service = token_service
        self.device_classifier = device_classifier
        self.logger = logger

    async def handle(self, command: IssueTokenCommand) -> IssuedToken:
        device_class = self.device_classifier.classify_device(command.request_metadata)
        issued = self.token_service.issue_token(command.username, device_class)
        self.logger.info(
            f"Issued token for {command.username} (audience={issued.audience})"
        )
        return issued


class AuthenticateTokenHandler:
    """Handle bearer token authentication.

    1. 校验签名是否正确
    2. 根据用户名加载登录信息
    3. 校验用户名一致且 token 未过期
    """

    def __init__(
        self,
        token_service: TokenService,
        login_info_provider: LoginInfoProvider,
    ):
        self.token_service = token_service
        self.login_info_provider = login_info_provider
        self.logger = logger

    async def handle(self, command: AuthenticateTokenCommand) -> LoginInfo:
        username = self.token_service.username_of(command.token)
        if username is None:
            raise TokenRejectedError(TokenState.MALFORMED)

        login_info = await self.login_info_provider.get_by_username(username)
        if login_info is None:
            raise LoginInfoNotFoundError(username)

        if not self.token_service.validate(command.token, login_info.username):
            state = self.token_service.inspect(command.token)
            self.logger.warning(f"Rejected token for {username}: {state}")
            if state == TokenState.EXPIRED:
                raise TokenRejectedError(state, "Token has expired")
            raise TokenRejectedError(state, "Token subject does not match login info")
        return login_info

#!/usr/bin/env python3
"""Token 运维脚本。

用于手动签发或检查 JWT，配置读取自环境变量 / .env（JWT_SECRET 等）。

使用方式：
    # 签发 token
    python scripts/token_tool.py issue --username alice --device mobile

    # 检查 token
    python scripts/token_tool.py inspect <token>
    python scripts/token_tool.py inspect <token> --json

退出码：token 有效返回 0，否则返回 1。
"""

import argparse
import json
import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.core.domain.exceptions import ConfigurationError  # noqa: E402
from src.core.infrastructure.logging import setup_logging  # noqa: E402
from src.core.infrastructure.security.jwt import get_token_service  # noqa: E402
from src.modules.auth.domain.entities import DeviceClass, TokenState  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Issue or inspect JWT access tokens")
    subparsers = parser.add_subparsers(dest="command", required=True)

    issue = subparsers.add_parser("issue", help="签发 token")
    issue.add_argument("--username", required=True, help="用户名 (sub)")
    issue.add_argument(
        "--device",
        choices=[d.value for d in DeviceClass],
        default=DeviceClass.NORMAL.value,
        help="设备类型，决定 audience",
    )

    inspect = subparsers.add_parser("inspect", help="检查 token")
    inspect.add_argument("token", help="JWT 字符串")
    inspect.add_argument("--json", action="store_true", help="JSON 输出")

    return parser


def run_issue(args: argparse.Namespace) -> int:
    service = get_token_service()
    issued = service.issue_token(args.username, DeviceClass(args.device))
    print(issued.token)
    return 0


def run_inspect(args: argparse.Namespace) -> int:
    service = get_token_service()
    result = service.parse_claims(args.token)
    state = service.inspect(args.token)

    report = {
        "state": state.value,
        "error": result.error.value if result.error else None,
        "subject": None,
        "audience": None,
        "created": None,
        "expiration": None,
    }
    if result.claims is not None:
        claims = result.claims
        report.update(
            subject=claims.subject,
            audience=claims.audience,
            created=claims.created.isoformat() if claims.created else None,
            expiration=claims.expiration.isoformat() if claims.expiration else None,
        )

    if args.json:
        print(json.dumps(report, indent=2, ensure_ascii=False))
    else:
        for key, value in report.items():
            print(f"{key:<11} {value if value is not None else '-'}")

    return 0 if state == TokenState.VALID else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        if args.command == "issue":
            return run_issue(args)
        return run_inspect(args)
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

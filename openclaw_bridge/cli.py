from __future__ import annotations

import base64
import secrets
import sys

import uvicorn

from openclaw_bridge.app.settings import Settings
from libs.common.errors import ConfigurationError
from libs.common.logging import configure_logging, get_logger

logger = get_logger("openclaw_bridge.cli")


def _load_settings() -> Settings:
    app_settings = Settings()
    configure_logging(app_settings.log_level)
    try:
        app_settings.require_api_key()
    except ConfigurationError as exc:
        logger.error("missing_api_key", message=exc.message)
        raise SystemExit(1) from exc
    return app_settings


def _run(*, reload_enabled: bool) -> None:
    app_settings = _load_settings()
    logger.info(
        "server_starting",
        bot_name=app_settings.bot_name,
        host=app_settings.bind_address,
        port=app_settings.port,
        reload=reload_enabled,
    )
    uvicorn.run(
        "openclaw_bridge.app.main:create_app",
        factory=True,
        host=app_settings.bind_address,
        port=app_settings.port,
        reload=reload_enabled,
    )


def main() -> None:
    _run(reload_enabled=False)


def main_dev() -> None:
    _run(reload_enabled=True)


def generate_api_key() -> None:
    """``openssl rand -base64 32``과 같은 형태의 비밀키를 출력해요."""
    sys.stdout.write(base64.b64encode(secrets.token_bytes(32)).decode("ascii") + "\n")

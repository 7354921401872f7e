"""FastAPIアプリケーションファクトリー"""

import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from faultline.core.config import Settings, get_settings
from faultline.core.lifespan import lifespan
from faultline.core.logging import get_logger
from faultline.core.monitoring import init_monitoring
from faultline.infrastructure.security.encryption import SessionEncryption
from faultline.presentation import api_router, web_router
from faultline.presentation.errors import (
    EnvironmentMode,
    ErrorDispatcher,
    JinjaViewRenderer,
    PrettyPageRenderer,
)
from faultline.presentation.middleware.error_handler import error_response_middleware
from faultline.presentation.middleware.session import session_middleware

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class HealthCheckFilter(logging.Filter):
    """ヘルスチェックログを除外するフィルター"""

    def filter(self, record: logging.LogRecord) -> bool:
        """
        ログレコードをフィルタリング

        Args:
            record: ログレコード

        Returns:
            ログを出力する場合True、除外する場合False
        """
        return "/api/system/healthcheck" not in record.getMessage()


def create_error_dispatcher(
    app: FastAPI, settings: Settings, templates: Jinja2Templates
) -> ErrorDispatcher:
    """
    アプリケーションのルーター・テンプレートを使うErrorDispatcherを生成

    Args:
        app: FastAPIアプリケーションインスタンス
        settings: アプリケーション設定
        templates: Jinja2テンプレート

    Returns:
        ErrorDispatcher
    """
    return ErrorDispatcher(
        environment=EnvironmentMode.from_settings(settings),
        router=app.router,
        views=JinjaViewRenderer(templates),
        debug_page=PrettyPageRenderer(page_title=settings.DEBUG_PAGE_TITLE),
        login_route=settings.LOGIN_ROUTE_NAME,
        home_route=settings.HOME_ROUTE_NAME,
        error_template=settings.ERROR_TEMPLATE,
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    FastAPIアプリケーションを生成

    Args:
        settings: アプリケーション設定（省略時はget_settings()）

    Returns:
        FastAPIアプリケーションインスタンス
    """
    settings = settings or get_settings()

    init_monitoring(settings)

    # アプリケーションパラメータ
    app_params: dict[str, Any] = {
        "title": "Faultline",
        "description": "未処理例外をHTTPレスポンスへ変換するアプリケーション",
        "version": "0.1.0",
        "lifespan": lifespan,
    }

    # 本番環境ではドキュメントを無効化
    if settings.is_production:
        app_params["docs_url"] = None
        app_params["redoc_url"] = None
        app_params["openapi_url"] = None

    # アプリ生成
    app = FastAPI(**app_params)
    app.state.settings = settings

    # ヘルスチェックログフィルター
    logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())

    # Jinja2テンプレート
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    app.state.templates = templates

    # セッション暗号化
    app.state.session_encryption = SessionEncryption(settings.SESSION_ENCRYPTION_KEY)

    # エラーディスパッチャー
    app.state.error_dispatcher = create_error_dispatcher(app, settings, templates)

    # ミドルウェア登録（後に登録したものが外側）
    app.middleware("http")(error_response_middleware)
    app.middleware("http")(session_middleware)

    # ルーター登録
    app.include_router(api_router, prefix="/api")
    app.include_router(web_router)

    return app

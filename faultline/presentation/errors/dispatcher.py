"""
未処理例外をHTTPレスポンスへ変換するディスパッチャー

1リクエストにつき1回だけ呼ばれ、例外を記録したうえで
以下のいずれかのレスポンスを返す。

- API/CLI/テスト向けのJSONエラー
- 未ログイン時のログインページへのリダイレクト
- 権限不足時のトップページへのリダイレクト
- 開発環境での詳細エラーページ
- 本番環境での汎用エラーページ
"""

import json
import logging
from typing import Optional

import sentry_sdk
from fastapi import Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, RedirectResponse

from faultline.core.logging import get_logger
from faultline.domain.exceptions.base import ErrorKind
from faultline.infrastructure.session.store import (
    LOGIN_REFERRER_KEY,
    FlashLevel,
    SessionStore,
)
from faultline.presentation.schemas.errors import ApiErrorResponse

from .context import EnvironmentMode, RequestContext
from .interfaces import DebugPageRenderer, RouteResolver, ViewRenderer
from .report import ErrorReport

NOT_LOGGED_IN_MESSAGE = "You must be logged in to access this page."
PERMISSION_DENIED_MESSAGE = (
    "You do not have permission to access this portion of the site."
)


class ErrorDispatcher:
    """
    エラーディスパッチャー

    Args:
        environment: 実行モード
        router: 名前付きルートの解決に使うルーター
        views: 汎用エラーページの描画に使うビューレンダラー
        debug_page: 詳細エラーページのレンダラー
        logger: 例外を記録するロガー（省略時はモジュールのロガー）
        login_route: ログインページのルート名
        home_route: トップページのルート名
        error_template: 汎用エラーページのテンプレート名
    """

    def __init__(
        self,
        environment: EnvironmentMode,
        router: RouteResolver,
        views: ViewRenderer,
        debug_page: DebugPageRenderer,
        logger: Optional[logging.Logger] = None,
        *,
        login_route: str = "account:login",
        home_route: str = "home",
        error_template: str = "system/error_general.html",
    ) -> None:
        self.environment = environment
        self.router = router
        self.views = views
        self.debug_page = debug_page
        self.logger = logger or get_logger(__name__)
        self.login_route = login_route
        self.home_route = home_route
        self.error_template = error_template

    def dispatch(
        self,
        request_context: RequestContext,
        session: SessionStore,
        error: BaseException,
    ) -> Response:
        """
        例外を記録し、リクエストに応じたレスポンスを返す

        Args:
            request_context: リクエスト情報
            session: リクエストのセッション
            error: 未処理の例外

        Returns:
            最終的なHTTPレスポンス
        """
        report = ErrorReport.from_exception(error)

        # 応答方法に関係なく、必ず最初に記録する
        self.log(report)

        show_detailed = self.environment.show_detailed

        if self.expects_json(request_context):
            return self.api_response(report, show_detailed)

        if report.kind is ErrorKind.AUTHENTICATION_REQUIRED:
            # 未ログインの場合はログインページへ
            session.flash(NOT_LOGGED_IN_MESSAGE, FlashLevel.WARNING)

            # ログイン後のリダイレクト先を保存
            session.set(LOGIN_REFERRER_KEY, request_context.current_path)

            return self.redirect(self.login_route)

        if report.kind is ErrorKind.PERMISSION_DENIED:
            # 権限不足の場合はトップページへ
            session.flash(PERMISSION_DENIED_MESSAGE, FlashLevel.ERROR)
            return self.redirect(self.home_route)

        if show_detailed:
            content = self.debug_page.render(error, request_context, report.extra_data)
            return HTMLResponse(
                content=content, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        content = self.views.render(self.error_template, {"exception": error})
        return HTMLResponse(
            content=content, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    def log(self, report: ErrorReport) -> None:
        """例外を記録する（記録の失敗でレスポンス生成を止めない）"""
        try:
            self.logger.log(
                report.logger_level, report.message, extra=report.log_context()
            )
        except Exception as e:
            sentry_sdk.capture_exception(e)

    def expects_json(self, request_context: RequestContext) -> bool:
        """JSONのエラーレスポンスを返すべきか"""
        return (
            request_context.is_xhr
            or self.environment.command_line
            or self.environment.testing
        )

    def api_response(self, report: ErrorReport, show_detailed: bool) -> Response:
        body = ApiErrorResponse(
            code=report.code,
            message=report.message,
            trace=report.trace if show_detailed else [],
        )
        return Response(
            content=json.dumps(jsonable_encoder(body)),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            media_type="application/json",
        )

    def redirect(self, route_name: str) -> RedirectResponse:
        return RedirectResponse(
            url=str(self.router.url_path_for(route_name)),
            status_code=status.HTTP_302_FOUND,
        )

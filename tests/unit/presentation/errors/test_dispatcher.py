"""
ErrorDispatcherの単体テスト
"""

import json
import logging
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from faultline.domain.exceptions.base import (
    DomainError,
    ErrorKind,
    ForbiddenError,
    UnauthorizedError,
)
from faultline.infrastructure.session.store import (
    LOGIN_REFERRER_KEY,
    FlashLevel,
    SessionStore,
)
from faultline.presentation.errors.context import EnvironmentMode, RequestContext
from faultline.presentation.errors.dispatcher import (
    NOT_LOGGED_IN_MESSAGE,
    PERMISSION_DENIED_MESSAGE,
    ErrorDispatcher,
)
from tests.helpers import raised

ROUTES = {"account:login": "/account/login", "home": "/"}

DEVELOPMENT = EnvironmentMode(production=False)
PRODUCTION = EnvironmentMode(production=True)

BROWSER = RequestContext(is_xhr=False, current_path="/admin/stations?page=2")
XHR = RequestContext(is_xhr=True, current_path="/api/stations")


def make_dispatcher(environment: EnvironmentMode) -> ErrorDispatcher:
    router = MagicMock()
    router.url_path_for.side_effect = lambda name: ROUTES[name]

    views = MagicMock()
    views.render.return_value = "<h1>System Error</h1>"

    debug_page = MagicMock()
    debug_page.render.return_value = "<h1>Debug</h1>"

    return ErrorDispatcher(
        environment=environment,
        router=router,
        views=views,
        debug_page=debug_page,
        logger=MagicMock(),
    )


def body_of(response: Any) -> Any:
    return json.loads(response.body.decode())


ALL_ERRORS = [
    pytest.param(lambda: ZeroDivisionError("division by zero"), id="generic"),
    pytest.param(lambda: UnauthorizedError("no session"), id="authentication"),
    pytest.param(lambda: ForbiddenError(), id="permission"),
]


class TestLogging:
    """例外の記録のテスト"""

    @pytest.mark.parametrize("make_error", ALL_ERRORS)
    @pytest.mark.parametrize("environment", [DEVELOPMENT, PRODUCTION])
    @pytest.mark.parametrize("request_context", [BROWSER, XHR])
    def test_logged_exactly_once(
        self,
        make_error: Any,
        environment: EnvironmentMode,
        request_context: RequestContext,
    ) -> None:
        """どの分岐でもロガーへの書き込みが1回だけ行われること"""
        dispatcher = make_dispatcher(environment)

        dispatcher.dispatch(request_context, SessionStore(), raised(make_error()))

        assert dispatcher.logger.log.call_count == 1

    def test_default_level_is_error(self) -> None:
        """ログレベルの指定が無い例外はERRORで記録されること"""
        dispatcher = make_dispatcher(PRODUCTION)
        error = raised(ZeroDivisionError("division by zero"))

        dispatcher.dispatch(BROWSER, SessionStore(), error)

        level, message = dispatcher.logger.log.call_args.args
        assert level == logging.ERROR
        assert message == "division by zero"

    def test_declared_level_is_used(self) -> None:
        """例外が指定したログレベルで記録されること"""
        dispatcher = make_dispatcher(PRODUCTION)
        error = raised(UnauthorizedError("no session", logger_level=logging.INFO))

        dispatcher.dispatch(BROWSER, SessionStore(), error)

        level, message = dispatcher.logger.log.call_args.args
        assert level == logging.INFO
        assert message == "no session"

    def test_log_context_has_location_and_code(self) -> None:
        """ファイル・行番号・コードがコンテキストとして記録されること"""
        dispatcher = make_dispatcher(PRODUCTION)
        error = raised(DomainError("broken", code=42))

        dispatcher.dispatch(BROWSER, SessionStore(), error)

        extra = dispatcher.logger.log.call_args.kwargs["extra"]
        assert extra["code"] == 42
        assert extra["file"].endswith("helpers.py")
        assert isinstance(extra["line"], int)

    def test_logger_failure_does_not_stop_response(self) -> None:
        """ロガーが失敗してもレスポンスが生成されること"""
        dispatcher = make_dispatcher(PRODUCTION)
        dispatcher.logger.log.side_effect = RuntimeError("log storage down")

        with patch(
            "faultline.presentation.errors.dispatcher.sentry_sdk"
        ) as mock_sentry:
            response = dispatcher.dispatch(
                XHR, SessionStore(), raised(ValueError("bad"))
            )

        assert response.status_code == 500
        mock_sentry.capture_exception.assert_called_once()

    @pytest.mark.parametrize("request_context", [BROWSER, XHR])
    def test_unprintable_error_is_logged_by_class_name(
        self, request_context: RequestContext
    ) -> None:
        """__str__が失敗する例外もクラス名で1回記録されること"""

        class UnprintableError(Exception):
            def __str__(self) -> str:
                raise RuntimeError("cannot render message")

        dispatcher = make_dispatcher(PRODUCTION)

        response = dispatcher.dispatch(
            request_context, SessionStore(), raised(UnprintableError())
        )

        assert response.status_code == 500
        assert dispatcher.logger.log.call_count == 1
        assert dispatcher.logger.log.call_args.args[1] == "UnprintableError"
        if request_context is XHR:
            assert body_of(response)["message"] == "UnprintableError"


class TestMachineResponse:
    """JSONエラーレスポンスのテスト"""

    def test_xhr_development_includes_trace(self) -> None:
        """開発環境のXHRリクエストではトレース付きのJSONが返ること"""
        dispatcher = make_dispatcher(DEVELOPMENT)

        response = dispatcher.dispatch(
            XHR, SessionStore(), raised(ZeroDivisionError("division by zero"))
        )

        assert response.status_code == 500
        assert response.media_type == "application/json"
        body = body_of(response)
        assert body["code"] == 0
        assert body["message"] == "division by zero"
        assert len(body["trace"]) > 0
        assert set(body["trace"][0]) == {"file", "line", "function", "source"}

    def test_xhr_production_hides_trace(self) -> None:
        """本番環境ではトレースが常に空であること"""
        dispatcher = make_dispatcher(PRODUCTION)

        response = dispatcher.dispatch(
            XHR, SessionStore(), raised(DomainError("broken", code=42))
        )

        assert response.status_code == 500
        assert body_of(response) == {"code": 42, "message": "broken", "trace": []}

    @pytest.mark.parametrize("make_error", ALL_ERRORS)
    @pytest.mark.parametrize(
        "environment",
        [
            EnvironmentMode(command_line=True),
            EnvironmentMode(testing=True),
            EnvironmentMode(production=True, command_line=True),
        ],
    )
    def test_command_line_and_testing_always_json(
        self, make_error: Any, environment: EnvironmentMode
    ) -> None:
        """CLI・テスト実行時はエラーの種類に関係なくJSONが返ること"""
        dispatcher = make_dispatcher(environment)
        session = SessionStore()

        response = dispatcher.dispatch(BROWSER, session, raised(make_error()))

        assert response.status_code == 500
        assert "location" not in response.headers
        assert "code" in body_of(response)
        assert session.modified is False

    @pytest.mark.parametrize("make_error", ALL_ERRORS)
    def test_xhr_takes_priority_over_redirects(self, make_error: Any) -> None:
        """XHRリクエストではリダイレクトせずJSONが返ること"""
        dispatcher = make_dispatcher(DEVELOPMENT)

        response = dispatcher.dispatch(XHR, SessionStore(), raised(make_error()))

        assert response.status_code == 500
        assert "message" in body_of(response)
        dispatcher.debug_page.render.assert_not_called()
        dispatcher.views.render.assert_not_called()

    def test_extra_tables_not_in_json(self) -> None:
        """診断テーブルはJSONに含まれないこと"""
        dispatcher = make_dispatcher(DEVELOPMENT)
        error = DomainError("broken", extra_data={"Job": {"id": 1}})

        response = dispatcher.dispatch(XHR, SessionStore(), raised(error))

        assert set(body_of(response)) == {"code", "message", "trace"}

    def test_explicit_empty_message_is_kept(self) -> None:
        """明示的な空メッセージが既定メッセージに置き換わらないこと"""
        dispatcher = make_dispatcher(PRODUCTION)

        response = dispatcher.dispatch(
            XHR, SessionStore(), raised(DomainError("", code=5))
        )

        assert body_of(response) == {"code": 5, "message": "", "trace": []}


class TestAuthenticationRedirect:
    """未ログイン時のリダイレクトのテスト"""

    @pytest.mark.parametrize("environment", [DEVELOPMENT, PRODUCTION])
    def test_redirects_to_login(self, environment: EnvironmentMode) -> None:
        """ログインページへ302リダイレクトされること"""
        dispatcher = make_dispatcher(environment)
        session = SessionStore()
        error = raised(UnauthorizedError("no session", code=403))

        response = dispatcher.dispatch(BROWSER, session, error)

        assert response.status_code == 302
        assert response.headers["location"] == "/account/login"
        assert session.pop_flashes() == [
            {"message": NOT_LOGGED_IN_MESSAGE, "level": FlashLevel.WARNING.value}
        ]
        assert session.get(LOGIN_REFERRER_KEY) == "/admin/stations?page=2"
        dispatcher.debug_page.render.assert_not_called()

    def test_kind_tag_on_plain_domain_error(self) -> None:
        """kindを指定したDomainErrorも同じ分岐になること"""
        dispatcher = make_dispatcher(DEVELOPMENT)
        error = raised(DomainError("expired", kind=ErrorKind.AUTHENTICATION_REQUIRED))

        response = dispatcher.dispatch(BROWSER, SessionStore(), error)

        assert response.status_code == 302
        assert response.headers["location"] == "/account/login"


class TestPermissionRedirect:
    """権限不足時のリダイレクトのテスト"""

    @pytest.mark.parametrize("environment", [DEVELOPMENT, PRODUCTION])
    def test_redirects_to_home(self, environment: EnvironmentMode) -> None:
        """トップページへ302リダイレクトされること"""
        dispatcher = make_dispatcher(environment)
        session = SessionStore()

        response = dispatcher.dispatch(BROWSER, session, raised(ForbiddenError()))

        assert response.status_code == 302
        assert response.headers["location"] == "/"
        assert session.pop_flashes() == [
            {"message": PERMISSION_DENIED_MESSAGE, "level": FlashLevel.ERROR.value}
        ]
        assert session.get(LOGIN_REFERRER_KEY) is None


class TestHtmlErrorPages:
    """HTMLエラーページのテスト"""

    def test_development_renders_debug_page(self) -> None:
        """開発環境では診断テーブル付きの詳細ページが返ること"""
        dispatcher = make_dispatcher(DEVELOPMENT)
        error = DomainError("broken")
        error.add_extra_data("First", {"a": 1})
        error.add_extra_data("Second", {"b": 2})
        error = raised(error)

        response = dispatcher.dispatch(BROWSER, SessionStore(), error)

        assert response.status_code == 500
        assert response.body == b"<h1>Debug</h1>"
        rendered_error, context, tables = dispatcher.debug_page.render.call_args.args
        assert rendered_error is error
        assert context is BROWSER
        assert list(tables) == ["First", "Second"]
        dispatcher.views.render.assert_not_called()

    def test_production_renders_generic_template(self) -> None:
        """本番環境では汎用エラーテンプレートが返ること"""
        dispatcher = make_dispatcher(PRODUCTION)
        error = raised(ZeroDivisionError("division by zero"))

        response = dispatcher.dispatch(BROWSER, SessionStore(), error)

        assert response.status_code == 500
        assert response.body == b"<h1>System Error</h1>"
        dispatcher.views.render.assert_called_once_with(
            "system/error_general.html", {"exception": error}
        )
        dispatcher.debug_page.render.assert_not_called()

    def test_debug_page_failure_propagates_after_logging(self) -> None:
        """詳細ページの描画失敗は記録後にそのまま送出されること"""
        dispatcher = make_dispatcher(DEVELOPMENT)
        dispatcher.debug_page.render.side_effect = RuntimeError("render failed")

        with pytest.raises(RuntimeError, match="render failed"):
            dispatcher.dispatch(BROWSER, SessionStore(), raised(ValueError("bad")))

        assert dispatcher.logger.log.call_count == 1

    def test_template_failure_propagates_after_logging(self) -> None:
        """汎用テンプレートの描画失敗は記録後にそのまま送出されること"""
        dispatcher = make_dispatcher(PRODUCTION)
        dispatcher.views.render.side_effect = RuntimeError("template missing")

        with pytest.raises(RuntimeError, match="template missing"):
            dispatcher.dispatch(BROWSER, SessionStore(), raised(ValueError("bad")))

        assert dispatcher.logger.log.call_count == 1

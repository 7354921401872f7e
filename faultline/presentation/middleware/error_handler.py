"""エラーハンドリングミドルウェア"""

from collections.abc import Awaitable, Callable

import sentry_sdk
from fastapi import Request, Response

from faultline.presentation.api.deps import get_session
from faultline.presentation.errors import ErrorDispatcher, RequestContext


async def error_response_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """
    全ての未処理例外をキャッチしてErrorDispatcherに渡す

    ディスパッチ自体が失敗した場合の例外はそのまま送出し、
    最外層のServerErrorMiddlewareに任せる

    Args:
        request: HTTPリクエスト
        call_next: 次のミドルウェア/エンドポイント

    Returns:
        HTTPレスポンス
    """
    try:
        return await call_next(request)
    except Exception as e:
        sentry_sdk.capture_exception(e)

        dispatcher: ErrorDispatcher = request.app.state.error_dispatcher
        return dispatcher.dispatch(
            RequestContext.from_request(request), get_session(request), e
        )

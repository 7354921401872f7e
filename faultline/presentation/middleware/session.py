"""セッション管理ミドルウェア"""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from faultline.core.config import Settings
from faultline.core.logging import get_logger
from faultline.infrastructure.security.encryption import SessionEncryption
from faultline.infrastructure.session.store import SessionStore

logger = get_logger(__name__)


async def session_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """
    セッション管理ミドルウェア

    Cookieからセッションを復元してrequest.state.sessionに設定し、
    レスポンス返却時に変更があればCookieへ書き戻す

    Args:
        request: HTTPリクエスト
        call_next: 次のミドルウェア/エンドポイント

    Returns:
        HTTPレスポンス
    """
    settings: Settings = request.app.state.settings
    encryption: SessionEncryption = request.app.state.session_encryption

    session = SessionStore.from_cookie(
        request.cookies.get(settings.SESSION_COOKIE_NAME), encryption
    )
    request.state.session = session

    response = await call_next(request)

    if session.modified:
        try:
            cookie = session.dump(encryption)
        except (TypeError, ValueError) as e:
            # 保存に失敗してもレスポンスはそのまま返す（セッションの変更は失われる）
            logger.error(f"Failed to store session cookie: {e}")
            return response

        response.set_cookie(
            key=settings.SESSION_COOKIE_NAME,
            value=cookie,
            max_age=settings.SESSION_EXPIRE,
            httponly=True,
            secure=settings.is_production,  # 本番環境ではHTTPSのみ
            samesite="lax",
        )

    return response

from fastapi import Request

from ...infrastructure.session.store import SessionStore


def get_session(request: Request) -> SessionStore:
    """
    セッションを取得するdependency

    セッションミドルウェアを通っていないリクエストでは、
    保存されない空のセッションを返す
    """
    session = getattr(request.state, "session", None)
    if isinstance(session, SessionStore):
        return session
    session = SessionStore()
    request.state.session = session
    return session

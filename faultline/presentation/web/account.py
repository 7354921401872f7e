from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from faultline.infrastructure.session.store import LOGIN_REFERRER_KEY, SessionStore
from faultline.presentation.api.deps import get_session
from faultline.utils import get_templates

router = APIRouter()


@router.get("/login", response_class=HTMLResponse, name="account:login")
async def login(request: Request, session: SessionStore = Depends(get_session)):
    """
    ログインページ

    未ログインでリダイレクトされた場合は、元のページを`next`として渡す
    """
    return get_templates(request).TemplateResponse(
        request,
        "account/login.html",
        {
            "flashes": session.pop_flashes(),
            "next": session.get(LOGIN_REFERRER_KEY),
        },
    )

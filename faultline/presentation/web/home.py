from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from faultline.infrastructure.session.store import SessionStore
from faultline.presentation.api.deps import get_session
from faultline.utils import get_templates

router = APIRouter()


@router.get("/", response_class=HTMLResponse, name="home")
async def home(request: Request, session: SessionStore = Depends(get_session)):
    """
    トップページ

    権限不足でリダイレクトされた場合のフラッシュメッセージを表示する
    """
    return get_templates(request).TemplateResponse(
        request, "home.html", {"flashes": session.pop_flashes()}
    )

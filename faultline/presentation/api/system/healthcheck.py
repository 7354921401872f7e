from datetime import datetime, timezone

from fastapi import APIRouter, Request

from faultline.core.config import Settings
from faultline.presentation.schemas.system import HealthCheckResponse

router = APIRouter()


@router.get("/", response_model=HealthCheckResponse)
async def healthcheck(request: Request) -> HealthCheckResponse:
    """
    ヘルスチェックエンドポイント

    - アプリケーションuptime
    - 環境情報を返す
    """
    settings: Settings = request.app.state.settings

    start_time = getattr(request.app.state, "start_time", None)
    uptime_seconds = 0.0
    if start_time:
        uptime_seconds = (datetime.now(timezone.utc) - start_time).total_seconds()

    return HealthCheckResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=uptime_seconds,
        environment=settings.normalized_env_mode,
    )

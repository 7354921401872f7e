"""アプリケーションライフサイクル管理"""

import contextlib
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import FastAPI

from faultline.core.logging import get_logger

logger = get_logger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    アプリケーションのライフサイクル管理

    起動時:
    - 起動時刻の記録（healthcheckのuptime計算用）

    Args:
        app: FastAPIアプリケーションインスタンス

    Yields:
        None
    """
    app.state.start_time = datetime.now(timezone.utc)
    logger.info(f"Application started ({app.state.settings.ENV_MODE} mode)")

    yield

    logger.info("Application stopped")

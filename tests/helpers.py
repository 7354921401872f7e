"""テスト用のヘルパー"""

from fastapi import APIRouter

from faultline.domain.exceptions.base import (
    DomainError,
    ForbiddenError,
    UnauthorizedError,
)

failing_router = APIRouter()


def raised(error: BaseException) -> BaseException:
    """
    例外を実際に送出してトレースバック付きで返す

    Args:
        error: 送出する例外

    Returns:
        __traceback__が設定された例外
    """
    try:
        raise error
    except BaseException as e:
        return e


@failing_router.get("/generic")
async def fail_generic() -> None:
    1 / 0


@failing_router.get("/tables")
async def fail_with_tables() -> None:
    error = DomainError("Import failed", code=42)
    error.add_extra_data("Import Job", {"job_id": 7, "source": "<upload>"})
    error.add_extra_data("Station", {"name": "Radio One"})
    raise error


@failing_router.get("/login")
async def fail_login() -> None:
    raise UnauthorizedError("no session", code=403)


@failing_router.get("/forbidden")
async def fail_forbidden() -> None:
    raise ForbiddenError()

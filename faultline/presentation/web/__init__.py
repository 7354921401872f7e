from fastapi import APIRouter

from . import account, home

router = APIRouter()
router.include_router(home.router, tags=["web"])
router.include_router(account.router, prefix="/account", tags=["web"])

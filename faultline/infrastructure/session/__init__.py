from .store import FLASH_KEY, LOGIN_REFERRER_KEY, FlashLevel, SessionStore

__all__ = ["FLASH_KEY", "LOGIN_REFERRER_KEY", "FlashLevel", "SessionStore"]

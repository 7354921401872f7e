"""Infrastructure layer - Technical implementations"""

from .security.encryption import SessionEncryption
from .session.store import FlashLevel, SessionStore

__all__ = ["SessionEncryption", "FlashLevel", "SessionStore"]

"""
Cookieベースのセッションストア

リクエスト単位でセッションデータを保持し、フラッシュメッセージと
小さなキー/値（ログイン後のリダイレクト先など）を扱う。
"""

from enum import Enum
from typing import Any, Optional

from faultline.core.logging import get_logger
from faultline.infrastructure.security.encryption import SessionEncryption

logger = get_logger(__name__)

FLASH_KEY = "_flash"
LOGIN_REFERRER_KEY = "login_referrer"


class FlashLevel(str, Enum):
    """フラッシュメッセージの重要度"""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class SessionStore:
    """
    1リクエスト分のセッションデータ

    変更があった場合のみ`modified`がTrueになり、
    セッションミドルウェアがCookieへ書き戻す。
    """

    def __init__(self, data: Optional[dict[str, Any]] = None) -> None:
        self._data: dict[str, Any] = dict(data or {})
        self.modified = False

    @classmethod
    def from_cookie(
        cls, cookie: Optional[str], encryption: SessionEncryption
    ) -> "SessionStore":
        """
        Cookie値からセッションを復元

        復号できないCookieは空のセッションとして扱う

        Args:
            cookie: セッションCookieの値
            encryption: 暗号化インスタンス

        Returns:
            SessionStore
        """
        if not cookie:
            return cls()
        try:
            return cls(encryption.decrypt(cookie))
        except ValueError as e:
            logger.warning(f"Discarding unreadable session cookie: {e}")
            return cls()

    def dump(self, encryption: SessionEncryption) -> str:
        """Cookieに格納する文字列へ変換"""
        return encryption.encrypt(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.modified = True

    def pop(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        self.modified = True
        return self._data.pop(key)

    def flash(self, message: str, level: FlashLevel = FlashLevel.INFO) -> None:
        """
        次に表示されるページ向けのフラッシュメッセージを追加

        Args:
            message: 表示するメッセージ
            level: 重要度
        """
        messages = list(self._data.get(FLASH_KEY, []))
        messages.append({"message": message, "level": FlashLevel(level).value})
        self.set(FLASH_KEY, messages)

    def pop_flashes(self) -> list[dict[str, str]]:
        """保留中のフラッシュメッセージを取り出して削除"""
        return list(self.pop(FLASH_KEY, []))

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

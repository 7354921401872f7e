"""
セッションCookieの暗号化モジュール

Fernet (対称暗号化) を使用してCookieに保存するセッションデータを保護する
"""

import base64
import binascii
import json
import logging
from typing import Any, Optional

from cryptography.fernet import Fernet, InvalidToken

from faultline.core.config import get_settings

logger = logging.getLogger(__name__)


class SessionEncryption:
    """
    セッションデータの暗号化/復号化

    暗号化キーが無い場合はBase64エンコードしたJSONをそのまま扱う（非推奨）
    """

    def __init__(self, encryption_key: Optional[str] = None):
        """
        Args:
            encryption_key: 暗号化キー（Noneの場合は設定から取得）
        """
        # 依存性注入: テスト時は明示的にキーを渡せる
        if encryption_key is None:
            settings = get_settings()
            encryption_key = settings.SESSION_ENCRYPTION_KEY

        self.encryption_key = encryption_key
        if self.encryption_key:
            try:
                self.cipher: Optional[Fernet] = Fernet(self.encryption_key.encode())
                self.enabled = True
                logger.info("Session encryption enabled")
            except Exception as e:
                logger.error(f"Failed to initialize session encryption: {e}")
                self.cipher = None
                self.enabled = False
        else:
            self.cipher = None
            self.enabled = False
            logger.warning("Session encryption disabled (SESSION_ENCRYPTION_KEY not set)")

    def encrypt(self, data: dict[str, Any]) -> str:
        """
        セッションデータを暗号化

        Args:
            data: 暗号化するデータ（dict）

        Returns:
            Cookieに格納できるURLセーフな文字列
        """
        json_bytes = json.dumps(data, ensure_ascii=False).encode("utf-8")

        if not self.enabled or not self.cipher:
            logger.warning("Storing session data without encryption")
            return base64.urlsafe_b64encode(json_bytes).decode("ascii")

        try:
            return self.cipher.encrypt(json_bytes).decode("ascii")
        except Exception as e:
            logger.error(f"Failed to encrypt session data: {e}")
            raise ValueError("Session encryption failed")

    def decrypt(self, encrypted_data: str) -> dict[str, Any]:
        """
        暗号化されたセッションデータを復号化

        Args:
            encrypted_data: encrypt()が返した文字列

        Returns:
            復号化されたデータ（dict）

        Raises:
            ValueError: 復号化に失敗した場合
        """
        try:
            if not self.enabled or not self.cipher:
                json_bytes = base64.urlsafe_b64decode(encrypted_data.encode("ascii"))
            else:
                json_bytes = self.cipher.decrypt(encrypted_data.encode("ascii"))
            data = json.loads(json_bytes.decode("utf-8"))
        except InvalidToken:
            logger.error("Invalid encryption token for session data")
            raise ValueError("Invalid or corrupted session data")
        except (binascii.Error, UnicodeError, json.JSONDecodeError) as e:
            logger.error(f"Failed to parse session data: {e}")
            raise ValueError("Invalid session data")

        if not isinstance(data, dict):
            raise ValueError("Invalid session data")
        return data

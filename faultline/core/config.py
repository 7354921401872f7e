from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import get_logger

logger = get_logger(__name__)


class Settings(BaseSettings):
    """
    アプリケーション設定
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # 未定義のフィールドを無視
    )

    ENV_MODE: Literal["development", "production", "test"] = "development"

    # バッチ/CLIから起動された場合にTrue（エラーは常にJSONで返す）
    IS_COMMAND_LINE: bool = False

    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_EXPIRE: int = 60 * 60 * 24  # 1 day

    SESSION_ENCRYPTION_KEY: str = ""

    @field_validator("SESSION_ENCRYPTION_KEY")
    @classmethod
    def validate_encryption_key(cls, v: str) -> str:
        """暗号化キー検証"""
        if not v:
            logger.warning(
                "SESSION_ENCRYPTION_KEY is not set. Session encryption disabled."
            )
            return ""

        try:
            from cryptography.fernet import Fernet

            Fernet(v.encode())
        except Exception:
            raise ValueError(
                'Invalid SESSION_ENCRYPTION_KEY format. Generate with: python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"'
            )

        return v

    # エラーディスパッチ
    LOGIN_ROUTE_NAME: str = "account:login"
    HOME_ROUTE_NAME: str = "home"
    ERROR_TEMPLATE: str = "system/error_general.html"
    DEBUG_PAGE_TITLE: str = "An error occurred!"

    SENTRY_DSN: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 1.0

    @field_validator("SENTRY_DSN")
    @classmethod
    def sentry_dsn_can_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        return v

    @property
    def is_development(self) -> bool:
        """開発環境かどうか"""
        return self.ENV_MODE == "development"

    @property
    def is_production(self) -> bool:
        """本番環境かどうか"""
        return self.ENV_MODE == "production"

    @property
    def is_test(self) -> bool:
        """テスト環境かどうか"""
        return self.ENV_MODE == "test"

    @property
    def normalized_env_mode(self) -> str:
        """監視ツールに渡す環境名"""
        return "local" if self.is_development else self.ENV_MODE


@lru_cache
def get_settings() -> Settings:
    """
    アプリケーション設定を取得（キャッシュ）
    """
    return Settings()

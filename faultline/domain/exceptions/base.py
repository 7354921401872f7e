"""
ドメイン層の例外クラス

ビジネスロジックで発生するエラーを表現する純粋なPython例外。
フレームワークに依存しない。

エラーの種類（ErrorKind）はクラス階層ではなく`kind`属性で表現し、
ErrorDispatcherはこのタグだけを見て応答方法を決める。
"""

import logging
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """エラーの分類タグ"""

    GENERIC = "generic"
    AUTHENTICATION_REQUIRED = "authentication_required"
    PERMISSION_DENIED = "permission_denied"


class DomainError(Exception):
    """
    ドメイン層のベース例外

    Attributes:
        message: エラーメッセージ
        code: エラーコード（数値）
        kind: エラーの分類タグ
        logger_level: ログ出力時のレベル（loggingモジュールのレベル値）
        extra_data: デバッグページに追加表示する診断テーブル（見出し → 値の辞書）
    """

    kind: ErrorKind = ErrorKind.GENERIC
    logger_level: int = logging.ERROR
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        code: int = 0,
        *,
        kind: Optional[ErrorKind] = None,
        logger_level: Optional[int] = None,
        extra_data: Optional[dict[str, dict[str, Any]]] = None,
    ) -> None:
        """
        Args:
            message: エラーメッセージ（省略時はクラスのデフォルト）
            code: エラーコード
            kind: 分類タグ（省略時はクラスのデフォルト）
            logger_level: ログレベル（省略時はクラスのデフォルト）
            extra_data: 診断テーブル（挿入順に表示される）
        """
        self.message = message if message is not None else self.default_message
        self.code = code
        if kind is not None:
            self.kind = kind
        if logger_level is not None:
            self.logger_level = logger_level
        self.extra_data: dict[str, dict[str, Any]] = dict(extra_data or {})
        super().__init__(self.message)

    def add_extra_data(self, legend: str, data: dict[str, Any]) -> None:
        """
        診断テーブルを追加

        Args:
            legend: テーブルの見出し
            data: キー → 値の診断データ
        """
        self.extra_data[legend] = dict(data)


class UnauthorizedError(DomainError):
    """認証エラー（未ログイン）"""

    kind = ErrorKind.AUTHENTICATION_REQUIRED
    default_message = "Authentication required"


class ForbiddenError(DomainError):
    """アクセス権限エラー"""

    kind = ErrorKind.PERMISSION_DENIED
    default_message = "Access forbidden"

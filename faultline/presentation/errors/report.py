"""例外からディスパッチ用の読み取り専用スナップショットを作る"""

import logging
import traceback
from dataclasses import dataclass, field
from typing import Any, Optional

from faultline.domain.exceptions.base import DomainError, ErrorKind
from faultline.presentation.schemas.errors import TraceFrame


def error_kind_of(error: BaseException) -> ErrorKind:
    """例外の分類タグ（タグが無ければGENERIC）"""
    kind = getattr(error, "kind", None)
    if isinstance(kind, ErrorKind):
        return kind
    return ErrorKind.GENERIC


def logger_level_of(error: BaseException) -> int:
    """例外が指定するログレベル（指定が無ければERROR）"""
    level = getattr(error, "logger_level", None)
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    return logging.ERROR


def error_code_of(error: BaseException) -> int:
    code = getattr(error, "code", 0)
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    return 0


def error_message_of(error: BaseException) -> str:
    if isinstance(error, DomainError):
        return error.message
    try:
        return str(error)
    except Exception:
        # __str__自体が失敗する例外はクラス名で記録する
        return type(error).__name__


@dataclass(frozen=True)
class ErrorReport:
    """
    ディスパッチ対象の例外情報

    Attributes:
        message: エラーメッセージ
        code: エラーコード
        file: 例外が発生したファイル（トレースバックが無い場合None）
        line: 例外が発生した行
        trace: スタックトレース（外側のフレームから順）
        kind: 分類タグ
        logger_level: ログレベル
        extra_data: 追加の診断テーブル
    """

    message: str
    code: int
    file: Optional[str]
    line: Optional[int]
    trace: list[TraceFrame] = field(default_factory=list)
    kind: ErrorKind = ErrorKind.GENERIC
    logger_level: int = logging.ERROR
    extra_data: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_exception(cls, error: BaseException) -> "ErrorReport":
        frames = traceback.extract_tb(error.__traceback__)
        trace = [
            TraceFrame(
                file=frame.filename,
                line=frame.lineno,
                function=frame.name,
                source=frame.line or None,
            )
            for frame in frames
        ]
        innermost = frames[-1] if frames else None

        extra_data: dict[str, dict[str, Any]] = {}
        if isinstance(error, DomainError):
            extra_data = dict(error.extra_data)

        return cls(
            message=error_message_of(error),
            code=error_code_of(error),
            file=innermost.filename if innermost else None,
            line=innermost.lineno if innermost else None,
            trace=trace,
            kind=error_kind_of(error),
            logger_level=logger_level_of(error),
            extra_data=extra_data,
        )

    def log_context(self) -> dict[str, Any]:
        """ロガーに渡す構造化コンテキスト"""
        return {"file": self.file, "line": self.line, "code": self.code}

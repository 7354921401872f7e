"""アプリケーション用のロギングユーティリティ。"""

import logging
import sys


def is_fastapi_context() -> bool:
    """
    FastAPI/uvicornコンテキストで実行中かどうかを判定する。

    Returns:
        bool: uvicornがロードされている場合True、そうでない場合False。
    """
    return "uvicorn" in sys.modules


def get_logger(name: str) -> logging.Logger:
    """
    ロガーインスタンスを取得する。

    uvicorn上で実行中の場合は"uvicorn"ロガーを使用し、
    サーバーのログと同じフォーマット・出力先に揃える。
    それ以外（テストやスクリプト）の場合はモジュール名のロガーを返す。

    Args:
        name: ロガー名、通常は呼び出し元モジュールの__name__を指定。

    Returns:
        logging.Logger: 設定済みのロガーインスタンス。
    """
    if is_fastapi_context():
        return logging.getLogger("uvicorn")
    return logging.getLogger(name)

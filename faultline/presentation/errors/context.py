"""エラーディスパッチに必要な実行環境・リクエスト情報"""

from dataclasses import dataclass, field
from typing import Mapping

from fastapi import Request

from faultline.core.config import Settings

XHR_HEADER = "X-Requested-With"
XHR_VALUE = "xmlhttprequest"


@dataclass(frozen=True)
class EnvironmentMode:
    """
    プロセス全体の実行モード

    Attributes:
        production: 本番環境かどうか（Trueの場合は詳細情報を一切出さない）
        command_line: CLI/バッチから起動されているかどうか
        testing: テストハーネス上で実行されているかどうか
    """

    production: bool = False
    command_line: bool = False
    testing: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "EnvironmentMode":
        return cls(
            production=settings.is_production,
            command_line=settings.IS_COMMAND_LINE,
            testing=settings.is_test,
        )

    @property
    def show_detailed(self) -> bool:
        """スタックトレース等の詳細情報を出してよいか"""
        return not self.production


@dataclass(frozen=True)
class RequestContext:
    """
    ディスパッチ判定に使うリクエストのスナップショット

    Attributes:
        is_xhr: X-Requested-With: XMLHttpRequest が付いているか
        current_path: 現在のパス（クエリ文字列を含む）
        method: HTTPメソッド
        url: リクエストURL
        client: クライアントアドレス
        headers: リクエストヘッダー
    """

    is_xhr: bool = False
    current_path: str = "/"
    method: str = "GET"
    url: str = ""
    client: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        current_path = request.url.path
        if request.url.query:
            current_path = f"{current_path}?{request.url.query}"

        return cls(
            is_xhr=request.headers.get(XHR_HEADER, "").lower() == XHR_VALUE,
            current_path=current_path,
            method=request.method,
            url=str(request.url),
            client=request.client.host if request.client else "",
            headers=dict(request.headers),
        )

    def environ(self) -> dict[str, str]:
        """デバッグページの"Request"パネルに表示する値"""
        environ = {
            "Method": self.method,
            "URL": self.url,
            "Client": self.client,
        }
        environ.update({f"Header: {k}": v for k, v in self.headers.items()})
        return environ

"""
開発者向けの詳細エラーページ

スタックフレームとソースコードの表示はStarletteのデバッグページを流用し、
診断テーブルとリクエスト情報のパネルを追加する。
"""

import html
from typing import Any, Mapping

from starlette.middleware.errors import ServerErrorMiddleware
from starlette.types import Receive, Scope, Send

from .context import RequestContext

STARLETTE_TITLE = "<title>Starlette Debugger</title>"

PANEL_TEMPLATE = """
        <div class="traceback-container data-table">
            <p class="traceback-title">{legend}</p>
            <table>{rows}</table>
        </div>
"""

ROW_TEMPLATE = "<tr><th>{key}</th><td>{value}</td></tr>"

EMPTY_ROW = '<tr><td class="empty">empty</td></tr>'


async def _unused_app(scope: Scope, receive: Receive, send: Send) -> None:
    """ServerErrorMiddlewareのコンストラクタ用（呼ばれない）"""


class PrettyPageRenderer:
    """
    詳細エラーページのHTMLを生成する

    Args:
        page_title: ページタイトル
        frame_limit: 各フレームで表示するソースの行数
    """

    def __init__(self, page_title: str = "An error occurred!", frame_limit: int = 7):
        self.page_title = page_title
        self.frame_limit = frame_limit
        self._debugger = ServerErrorMiddleware(app=_unused_app, debug=True)

    def render(
        self,
        error: BaseException,
        request_context: RequestContext,
        tables: Mapping[str, Mapping[str, Any]],
    ) -> str:
        """
        詳細エラーページを生成

        Args:
            error: 対象の例外
            request_context: リクエスト情報（"Request"パネルに表示）
            tables: 追加の診断テーブル（渡された順にパネルとして表示）

        Returns:
            HTML文字列
        """
        page = self._debugger.generate_html(error, limit=self.frame_limit)  # type: ignore[arg-type]
        page = page.replace(
            STARLETTE_TITLE, f"<title>{html.escape(self.page_title)}</title>", 1
        )

        panels = [self.render_panel(legend, data) for legend, data in tables.items()]
        panels.append(self.render_panel("Request", request_context.environ()))

        head, sep, tail = page.rpartition("</body>")
        return head + "".join(panels) + sep + tail

    def render_panel(self, legend: str, data: Mapping[str, Any]) -> str:
        rows = "".join(
            ROW_TEMPLATE.format(key=html.escape(str(key)), value=html.escape(str(value)))
            for key, value in data.items()
        )
        return PANEL_TEMPLATE.format(legend=html.escape(legend), rows=rows or EMPTY_ROW)

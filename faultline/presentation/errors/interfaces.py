"""ErrorDispatcherが依存する外部コンポーネントのインターフェース"""

from typing import Any, Mapping, Protocol

from .context import RequestContext


class RouteResolver(Protocol):
    """名前付きルートをパスに解決する（StarletteのRouterが満たす）"""

    def url_path_for(self, name: str, /, **path_params: Any) -> Any: ...


class ViewRenderer(Protocol):
    """テンプレートを描画してHTML文字列を返す"""

    def render(self, template_name: str, context: Mapping[str, Any]) -> str: ...


class DebugPageRenderer(Protocol):
    """開発者向けの詳細エラーページを生成する"""

    def render(
        self,
        error: BaseException,
        request_context: RequestContext,
        tables: Mapping[str, Mapping[str, Any]],
    ) -> str: ...

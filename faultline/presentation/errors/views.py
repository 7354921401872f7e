"""Jinja2テンプレートによるビュー描画"""

from typing import Any, Mapping

from fastapi.templating import Jinja2Templates


class JinjaViewRenderer:
    """
    Jinja2Templatesをラップし、テンプレート名とコンテキストからHTMLを返す

    Requestオブジェクトを必要としないため、ミドルウェア内からも利用できる
    """

    def __init__(self, templates: Jinja2Templates) -> None:
        self.templates = templates

    def render(self, template_name: str, context: Mapping[str, Any]) -> str:
        template = self.templates.get_template(template_name)
        return template.render(**context)

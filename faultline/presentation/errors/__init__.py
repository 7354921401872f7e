"""未処理例外のディスパッチ"""

from .context import EnvironmentMode, RequestContext
from .debug_page import PrettyPageRenderer
from .dispatcher import ErrorDispatcher
from .report import ErrorReport
from .views import JinjaViewRenderer

__all__ = [
    "EnvironmentMode",
    "RequestContext",
    "PrettyPageRenderer",
    "ErrorDispatcher",
    "ErrorReport",
    "JinjaViewRenderer",
]

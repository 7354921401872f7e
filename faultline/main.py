"""ASGIエントリーポイント（uvicorn faultline.main:app）"""

from faultline.core.app_factory import create_app

app = create_app()

"""
pytest設定と共通フィクスチャ
"""

import os
from typing import Any, Callable, Generator

import pytest
from cryptography.fernet import Fernet
from fastapi import FastAPI
from fastapi.testclient import TestClient


def pytest_configure(config: Any) -> None:
    """
    pytest実行前の設定

    暗号化キーをモジュールインポート前に設定する必要があるため、
    フィクスチャではなくpytest_configureフックで設定
    """
    # テスト用暗号化キーを設定
    key = Fernet.generate_key().decode()
    os.environ["SESSION_ENCRYPTION_KEY"] = key


# pytest_configure後にインポート（環境変数設定後にモジュールをロード）
from faultline.core.app_factory import create_app  # noqa: E402
from faultline.core.config import Settings  # noqa: E402
from tests.helpers import failing_router  # noqa: E402


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """
    .envを読み込まないSettingsを生成するファクトリー

    Returns:
        キーワード引数で設定を上書きできるファクトリー関数
    """

    def _make(**overrides: Any) -> Settings:
        params: dict[str, Any] = {
            "_env_file": None,
            "SESSION_ENCRYPTION_KEY": os.environ["SESSION_ENCRYPTION_KEY"],
        }
        params.update(overrides)
        return Settings(**params)

    return _make


@pytest.fixture
def make_app(make_settings: Callable[..., Settings]) -> Callable[..., FastAPI]:
    """
    例外を送出するテスト用ルートを追加したアプリケーションのファクトリー
    """

    def _make(**overrides: Any) -> FastAPI:
        app = create_app(make_settings(**overrides))
        app.include_router(failing_router, prefix="/fail")
        return app

    return _make


@pytest.fixture
def make_client(
    make_app: Callable[..., FastAPI],
) -> Generator[Callable[..., TestClient], None, None]:
    """
    テスト用FastAPIクライアントのファクトリー

    Yields:
        環境設定を受け取りTestClientを返す関数
    """
    clients: list[TestClient] = []

    def _make(**overrides: Any) -> TestClient:
        client = TestClient(make_app(**overrides))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    """開発環境のテスト用クライアント"""
    return make_client(ENV_MODE="development")

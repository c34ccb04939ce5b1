# tests/unit/routes/conftest.py
"""路由契约测试专用 fixtures.

提供 test_client 与 CLI runner。
"""

import pytest

from survey_export import create_app
from survey_export.settings import Settings


@pytest.fixture(scope="function")
def app(monkeypatch):
    """创建测试应用实例."""
    monkeypatch.setenv("FLASK_ENV", "testing")

    settings = Settings.load()
    app = create_app(settings=settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture(scope="function")
def client(app):
    """创建测试客户端."""
    return app.test_client()


@pytest.fixture(scope="function")
def cli_runner(app):
    """创建命令行测试 runner."""
    return app.test_cli_runner()

# tests/integration/conftest.py
"""集成测试专用 fixtures.

提供真实 PostgreSQL 连接与建表/清理机制。
"""

import os

import pytest

# 集成测试需要真实 PostgreSQL，检查环境变量
if not os.environ.get("DATABASE_URL", "").startswith("postgresql+psycopg://"):
    pytest.skip(
        "集成测试需要真实 PostgreSQL，请设置 DATABASE_URL(postgresql+psycopg://...) 环境变量",
        allow_module_level=True,
    )

from survey_export import create_app, db
from survey_export.settings import Settings


@pytest.fixture(scope="session")
def app():
    """创建测试应用实例（整个测试会话复用）."""
    app = create_app(settings=Settings.load())
    app.config["TESTING"] = True
    return app


@pytest.fixture(scope="function")
def db_session(app):
    """数据库会话，测试前建表、测试后删表.

    需要使用专用的测试数据库。
    """
    with app.app_context():
        import survey_export.models  # noqa: F401

        db.create_all()

        yield db.session

        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def client(app, db_session):
    """测试客户端，每个测试函数独立."""
    return app.test_client()

# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供隔离环境变量与问卷组替身等通用 fixtures。
"""

from dataclasses import dataclass

import pytest


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch):
    """为 unit tests 强制注入隔离环境变量.

    目标:
    - unit tests 不依赖外部 PostgreSQL
    - 避免开发者本机环境变量影响测试稳定性
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("APP_TIMEZONE", "Asia/Shanghai")
    monkeypatch.delenv("EXPORT_OUTPUT_DIR", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)


@dataclass
class DummySurveyGroup:
    id: int
    name: str


@pytest.fixture
def survey_group():
    """名称为 q3-survey 的问卷组替身."""
    return DummySurveyGroup(id=42, name="q3-survey")

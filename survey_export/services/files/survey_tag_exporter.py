"""问卷组标签 CSV 导出器.

职责:
- 渲染 COPY 查询模板,通过 PostgreSQL `COPY ... TO STDOUT` 直接取得 CSV 文本
- 生成导出文件名
- 不做行级转换、不校验 CSV 内容、不重试
"""

from __future__ import annotations

import codecs
from collections.abc import Callable
from contextlib import suppress
from datetime import date
from typing import TYPE_CHECKING, Any, Protocol

from jinja2 import Environment, PackageLoader, StrictUndefined, Undefined
from psycopg import sql

from survey_export import db
from survey_export.utils.slug_utils import parameterize
from survey_export.utils.structlog_config import log_info
from survey_export.utils.time_utils import time_utils

if TYPE_CHECKING:
    from jinja2 import Template

    from survey_export.types.dbapi import CopyConnection, CopyCursor

SQL_QUERY_TEMPLATE_NAME = "survey_tags_export.sql.j2"


class SurveyGroupLike(Protocol):
    """导出所需的问卷组字段."""

    id: Any
    name: str


def _sql_literal(value: object) -> str:
    if isinstance(value, Undefined):
        value._fail_with_undefined_error()
    return sql.Literal(value).as_string(None)


def build_query_environment() -> Environment:
    """创建渲染 COPY 查询模板的 Jinja2 环境.

    缺失参数直接抛出 `UndefinedError`;参数统一经 `sql_literal` 过滤器转义为 SQL 字面量.
    """
    environment = Environment(
        loader=PackageLoader("survey_export", "services/files/queries"),
        undefined=StrictUndefined,
        autoescape=False,
    )
    environment.filters["sql_literal"] = _sql_literal
    return environment


SQL_QUERY_TEMPLATE = build_query_environment().get_template(SQL_QUERY_TEMPLATE_NAME)


def session_raw_connection() -> CopyConnection:
    """返回当前 SQLAlchemy 会话绑定的 DBAPI 连接."""
    return db.session.connection().connection


class SurveyTagExporter:
    """问卷组标签导出器.

    Args:
        survey_group: 待导出的问卷组,需提供 ``id`` 与 ``name``.
        connection_provider: 返回 DBAPI 连接的可调用对象,默认取会话连接.
        template: COPY 查询模板,默认使用包内模板.
        today_provider: 返回当前日期的可调用对象,默认取应用时区日期.

    Example:
        >>> exporter = SurveyTagExporter(survey_group)
        >>> content = exporter.export()
        >>> exporter.filename()
        '2024-03-01-q3-survey-tags.csv'

    """

    def __init__(
        self,
        survey_group: SurveyGroupLike,
        *,
        connection_provider: Callable[[], CopyConnection] | None = None,
        template: Template | None = None,
        today_provider: Callable[[], date] | None = None,
    ) -> None:
        self._survey_group_id = survey_group.id
        # 名称无法转写为 ASCII 时(例如纯中文)回退为基于 ID 的 slug
        self._name = parameterize(survey_group.name) or f"survey-group-{survey_group.id}"
        self._connection_provider = connection_provider or session_raw_connection
        self._template = template or SQL_QUERY_TEMPLATE
        self._today_provider = today_provider or time_utils.today

    @property
    def name(self) -> str:
        return self._name

    def export(self) -> str:
        """执行 COPY 导出并返回完整 CSV 文本.

        Returns:
            str: UTF-8 解码后的 CSV 文本,包含查询定义的表头.

        Raises:
            jinja2.TemplateError: 模板渲染失败.
            psycopg.Error: 连接不可用或 COPY 执行失败.
            UnicodeDecodeError: 数据流不是合法的 UTF-8.

        """
        cursor: CopyCursor | None = None
        try:
            query = self._template.render(survey_group_id=self._survey_group_id)
            cursor = self._connection_provider().cursor()

            self._log("开始导出 CSV")
            csv_output = self._copy_out(cursor, query)
            self._log("完成导出 CSV")

            return csv_output
        finally:
            self._log("清理 PGresult 内存")
            if cursor is not None:
                try:
                    self._release_result(cursor)
                finally:
                    cursor.close()

    def filename(self) -> str:
        """生成导出文件名: ``<ISO 日期>-<slug>-tags.csv``."""
        return f"{self._today_provider().isoformat()}-{self._name}-tags.csv"

    @staticmethod
    def _copy_out(cursor: CopyCursor, query: str) -> str:
        # COPY 数据流一律按 UTF-8 解码,不依赖连接的 client_encoding
        decoder = codecs.getincrementaldecoder("utf-8")()
        chunks: list[str] = []
        with cursor.copy(query) as copy:
            for chunk in copy:
                chunks.append(decoder.decode(bytes(chunk)))
        chunks.append(decoder.decode(b"", final=True))
        return "".join(chunks)

    @staticmethod
    def _release_result(cursor: CopyCursor) -> None:
        pg_result = getattr(cursor, "pgresult", None)
        if pg_result is not None and hasattr(pg_result, "clear"):
            pg_result.clear()

    def _log(self, message: str) -> None:
        # 日志失败不影响导出结果
        with suppress(Exception):
            log_info(
                f"SurveyTagExporter: {message}",
                module="files",
                survey_group_id=self._survey_group_id,
            )

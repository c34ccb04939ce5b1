from __future__ import annotations

from datetime import date

import pytest
from jinja2 import Template, UndefinedError

import survey_export.services.files.survey_tag_exporter as exporter_module
from survey_export.services.files.survey_tag_exporter import SQL_QUERY_TEMPLATE, SurveyTagExporter, build_query_environment

HEADER = "tag_id,survey_id,survey_title,tag_name,tag_category,tagged_at\n"


class _CopyStreamError(Exception):
    pass


class _FakePGResult:
    def __init__(self) -> None:
        self.clear_calls = 0

    def clear(self) -> None:
        self.clear_calls += 1


class _FakeCopy:
    def __init__(self, chunks: list[bytes], fail_at: int | None = None) -> None:
        self._chunks = chunks
        self._fail_at = fail_at
        self.consumed = 0

    def __enter__(self) -> _FakeCopy:
        return self

    def __exit__(self, *exc_info: object) -> bool:
        return False

    def __iter__(self):
        for index, chunk in enumerate(self._chunks):
            if self._fail_at is not None and index == self._fail_at:
                raise _CopyStreamError("server closed the connection unexpectedly")
            self.consumed += 1
            yield memoryview(chunk)


class _FakeCursor:
    def __init__(self, copy: _FakeCopy, *, with_result: bool = True, copy_error: Exception | None = None) -> None:
        self._copy = copy
        self._copy_error = copy_error
        self.pgresult = _FakePGResult() if with_result else None
        self.statements: list[str] = []
        self.closed = False

    def copy(self, statement: str) -> _FakeCopy:
        self.statements.append(statement)
        if self._copy_error is not None:
            raise self._copy_error
        return self._copy

    def close(self) -> None:
        self.closed = True


class _FakeConnection:
    def __init__(self, cursor: _FakeCursor) -> None:
        self._cursor = cursor

    def cursor(self) -> _FakeCursor:
        return self._cursor


def _build_exporter(survey_group, cursor: _FakeCursor, **kwargs) -> SurveyTagExporter:
    return SurveyTagExporter(
        survey_group,
        connection_provider=lambda: _FakeConnection(cursor),
        today_provider=kwargs.pop("today_provider", lambda: date(2024, 3, 1)),
        **kwargs,
    )


def _rows(count: int) -> list[bytes]:
    return [f"{index},7,Q3,tag-{index},topic,2024-03-01 10:00:00+08\n".encode() for index in range(1, count + 1)]


@pytest.mark.unit
def test_export_returns_header_and_every_row(survey_group) -> None:
    cursor = _FakeCursor(_FakeCopy([HEADER.encode(), *_rows(5)]))

    content = _build_exporter(survey_group, cursor).export()

    lines = content.splitlines()
    assert lines[0] == HEADER.strip()
    assert len(lines) == 6
    assert lines[1].startswith("1,")
    assert lines[-1].startswith("5,")


@pytest.mark.unit
def test_export_returns_only_header_when_group_has_no_tags(survey_group) -> None:
    cursor = _FakeCursor(_FakeCopy([HEADER.encode()]))

    content = _build_exporter(survey_group, cursor).export()

    assert content == HEADER


@pytest.mark.unit
def test_export_sends_rendered_copy_query(survey_group) -> None:
    cursor = _FakeCursor(_FakeCopy([]))

    _build_exporter(survey_group, cursor).export()

    assert len(cursor.statements) == 1
    statement = cursor.statements[0]
    assert statement.startswith("COPY (")
    assert "surveys.survey_group_id = 42" in statement
    assert "TO STDOUT WITH (FORMAT csv, HEADER true, ENCODING 'UTF8')" in statement


@pytest.mark.unit
def test_export_decodes_multibyte_utf8_split_across_chunks(survey_group) -> None:
    expected = "1,7,满意度调查,非常满意,情绪,2024-03-01\n2,7,Café,naïve,topic,2024-03-02\n"
    raw = expected.encode("utf-8")
    # 在多字节字符中间切分
    split_at = raw.index("满".encode()) + 1
    cursor = _FakeCursor(_FakeCopy([raw[:split_at], raw[split_at:]]))

    content = _build_exporter(survey_group, cursor).export()

    assert content == expected
    assert isinstance(content, str)


@pytest.mark.unit
def test_export_raises_on_truncated_utf8_and_still_releases_result(survey_group) -> None:
    raw = "1,满意\n".encode()
    cursor = _FakeCursor(_FakeCopy([raw[:-3]]))

    with pytest.raises(UnicodeDecodeError):
        _build_exporter(survey_group, cursor).export()

    assert cursor.pgresult.clear_calls == 1
    assert cursor.closed is True


@pytest.mark.unit
def test_export_releases_result_exactly_once_on_success(survey_group) -> None:
    cursor = _FakeCursor(_FakeCopy([HEADER.encode(), *_rows(2)]))

    _build_exporter(survey_group, cursor).export()

    assert cursor.pgresult.clear_calls == 1
    assert cursor.closed is True


@pytest.mark.unit
def test_export_propagates_mid_stream_failure_and_releases_result_once(survey_group) -> None:
    copy = _FakeCopy(_rows(5), fail_at=2)
    cursor = _FakeCursor(copy)
    exporter = _build_exporter(survey_group, cursor)
    outcome: list[str] = []

    with pytest.raises(_CopyStreamError, match="closed the connection"):
        outcome.append(exporter.export())

    assert copy.consumed == 2
    assert outcome == []
    assert cursor.pgresult.clear_calls == 1
    assert cursor.closed is True


@pytest.mark.unit
def test_export_propagates_copy_start_failure_and_releases_result_once(survey_group) -> None:
    class _UndefinedTable(Exception):
        pass

    error = _UndefinedTable('relation "survey_tags" does not exist')
    cursor = _FakeCursor(_FakeCopy([]), copy_error=error)

    with pytest.raises(_UndefinedTable) as exc_info:
        _build_exporter(survey_group, cursor).export()

    assert exc_info.value is error
    assert len(cursor.statements) == 1
    assert cursor.pgresult.clear_calls == 1
    assert cursor.closed is True


@pytest.mark.unit
def test_export_tolerates_missing_result_handle(survey_group) -> None:
    cursor = _FakeCursor(_FakeCopy([HEADER.encode()]), with_result=False)

    content = _build_exporter(survey_group, cursor).export()

    assert content == HEADER
    assert cursor.closed is True


@pytest.mark.unit
def test_export_propagates_template_error_without_touching_connection(survey_group) -> None:
    connection_calls: list[int] = []

    def _connection_provider():
        connection_calls.append(1)
        raise AssertionError("连接不应被获取")

    exporter = SurveyTagExporter(
        survey_group,
        connection_provider=_connection_provider,
        template=Template("COPY (SELECT {{ missing.attr }}) TO STDOUT"),
    )

    with pytest.raises(UndefinedError):
        exporter.export()

    assert connection_calls == []


@pytest.mark.unit
def test_export_propagates_connection_failure_unchanged(survey_group) -> None:
    class _ConnectionUnavailable(Exception):
        pass

    def _connection_provider():
        raise _ConnectionUnavailable("could not connect to server")

    exporter = SurveyTagExporter(survey_group, connection_provider=_connection_provider)

    with pytest.raises(_ConnectionUnavailable):
        exporter.export()


@pytest.mark.unit
def test_export_logs_start_end_and_cleanup(monkeypatch, survey_group) -> None:
    log_calls: list[tuple[str, dict[str, object]]] = []

    def _fake_log_info(message: str, **kwargs: object) -> None:
        log_calls.append((message, dict(kwargs)))

    monkeypatch.setattr(exporter_module, "log_info", _fake_log_info)
    cursor = _FakeCursor(_FakeCopy([HEADER.encode()]))

    _build_exporter(survey_group, cursor).export()

    assert [message for message, _ in log_calls] == [
        "SurveyTagExporter: 开始导出 CSV",
        "SurveyTagExporter: 完成导出 CSV",
        "SurveyTagExporter: 清理 PGresult 内存",
    ]
    assert all(kwargs["module"] == "files" for _, kwargs in log_calls)
    assert all(kwargs["survey_group_id"] == 42 for _, kwargs in log_calls)


@pytest.mark.unit
def test_export_logs_cleanup_on_failure(monkeypatch, survey_group) -> None:
    messages: list[str] = []
    monkeypatch.setattr(exporter_module, "log_info", lambda message, **_kwargs: messages.append(message))
    cursor = _FakeCursor(_FakeCopy(_rows(3), fail_at=1))

    with pytest.raises(_CopyStreamError):
        _build_exporter(survey_group, cursor).export()

    assert messages == ["SurveyTagExporter: 开始导出 CSV", "SurveyTagExporter: 清理 PGresult 内存"]


@pytest.mark.unit
def test_export_ignores_logging_failures(monkeypatch, survey_group) -> None:
    def _broken_log_info(message: str, **kwargs: object) -> None:
        raise RuntimeError("log sink unavailable")

    monkeypatch.setattr(exporter_module, "log_info", _broken_log_info)
    cursor = _FakeCursor(_FakeCopy([HEADER.encode(), *_rows(1)]))

    content = _build_exporter(survey_group, cursor).export()

    assert content.count("\n") == 2
    assert cursor.pgresult.clear_calls == 1


@pytest.mark.unit
def test_filename_uses_iso_date_and_slug(survey_group) -> None:
    exporter = _build_exporter(survey_group, _FakeCursor(_FakeCopy([])))

    assert exporter.filename() == "2024-03-01-q3-survey-tags.csv"
    assert exporter.filename() == exporter.filename()


@pytest.mark.unit
def test_filename_only_changes_date_segment_when_date_changes(survey_group) -> None:
    current = {"day": date(2024, 3, 1)}
    exporter = _build_exporter(survey_group, _FakeCursor(_FakeCopy([])), today_provider=lambda: current["day"])

    first = exporter.filename()
    current["day"] = date(2024, 12, 31)
    second = exporter.filename()

    assert first == "2024-03-01-q3-survey-tags.csv"
    assert second == "2024-12-31-q3-survey-tags.csv"
    assert first[len("2024-03-01") :] == second[len("2024-12-31") :]


@pytest.mark.unit
def test_constructor_parameterizes_group_name() -> None:
    class _Group:
        id = 9
        name = "Q3 Survey: Café & Co."

    exporter = SurveyTagExporter(_Group(), today_provider=lambda: date(2024, 3, 1))

    assert exporter.name == "q3-survey-cafe-co"
    assert exporter.filename() == "2024-03-01-q3-survey-cafe-co-tags.csv"


@pytest.mark.unit
def test_constructor_falls_back_to_id_slug_for_untransliterable_name() -> None:
    class _Group:
        id = 7
        name = "第三季度问卷"

    exporter = SurveyTagExporter(_Group(), today_provider=lambda: date(2024, 3, 1))

    assert exporter.filename() == "2024-03-01-survey-group-7-tags.csv"


@pytest.mark.unit
def test_query_template_requires_survey_group_id() -> None:
    with pytest.raises(UndefinedError):
        SQL_QUERY_TEMPLATE.render()


@pytest.mark.unit
def test_query_template_quotes_string_identifiers() -> None:
    query = SQL_QUERY_TEMPLATE.render(survey_group_id="7'; DROP TABLE surveys; --")

    assert "surveys.survey_group_id = '7''; DROP TABLE surveys; --'" in query


@pytest.mark.unit
def test_sql_literal_filter_raises_undefined_error_for_missing_value() -> None:
    template = build_query_environment().from_string("WHERE id = {{ survey_group_id | sql_literal }}")

    with pytest.raises(UndefinedError, match="survey_group_id"):
        template.render()

    assert template.render(survey_group_id=42) == "WHERE id = 42"

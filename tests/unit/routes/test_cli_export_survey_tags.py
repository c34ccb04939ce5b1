import pytest

import survey_export.cli as cli_module
from survey_export.errors import NotFoundError
from survey_export.services.files.csv_export_result import CsvExportResult


class _DummySurveyTagExportService:
    def export_survey_tags_csv(self, survey_group_id: int) -> CsvExportResult:
        if survey_group_id != 42:
            raise NotFoundError(message_key="SURVEY_GROUP_NOT_FOUND")
        return CsvExportResult(filename="2024-03-01-q3-survey-tags.csv", content="tag_id\r\n1\n满意\n")


@pytest.mark.unit
def test_export_survey_tags_command_writes_csv_file(cli_runner, monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(cli_module, "SurveyTagExportService", _DummySurveyTagExportService)

    result = cli_runner.invoke(args=["export-survey-tags", "42", "--output-dir", str(tmp_path / "exports")])

    assert result.exit_code == 0, result.output
    target = tmp_path / "exports" / "2024-03-01-q3-survey-tags.csv"
    assert result.output.strip() == str(target)
    assert target.read_bytes() == "tag_id\r\n1\n满意\n".encode()


@pytest.mark.unit
def test_export_survey_tags_command_defaults_to_configured_output_dir(app, cli_runner, monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(cli_module, "SurveyTagExportService", _DummySurveyTagExportService)
    app.config["EXPORT_OUTPUT_DIR"] = str(tmp_path)

    result = cli_runner.invoke(args=["export-survey-tags", "42"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "2024-03-01-q3-survey-tags.csv").exists()


@pytest.mark.unit
def test_export_survey_tags_command_fails_for_unknown_group(cli_runner, monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(cli_module, "SurveyTagExportService", _DummySurveyTagExportService)

    result = cli_runner.invoke(args=["export-survey-tags", "7", "--output-dir", str(tmp_path)])

    assert result.exit_code != 0
    assert isinstance(result.exception, NotFoundError)
    assert list(tmp_path.iterdir()) == []

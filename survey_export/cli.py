"""命令行入口.

注册 `flask export-survey-tags`,将问卷组标签导出为本地 CSV 文件.
"""

from __future__ import annotations

from pathlib import Path

import click
from flask import Flask, current_app
from flask.cli import with_appcontext

from survey_export.services.files.survey_tag_export_service import SurveyTagExportService
from survey_export.utils.route_safety import log_with_context


@click.command("export-survey-tags")
@click.argument("survey_group_id", type=int)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="输出目录,默认为 EXPORT_OUTPUT_DIR.",
)
@with_appcontext
def export_survey_tags_command(survey_group_id: int, output_dir: Path | None) -> None:
    """导出问卷组标签为 CSV 文件."""
    target_dir = output_dir or Path(current_app.config["EXPORT_OUTPUT_DIR"])
    result = SurveyTagExportService().export_survey_tags_csv(survey_group_id)

    target_dir.mkdir(parents=True, exist_ok=True)
    target_path = target_dir / result.filename
    target_path.write_text(result.content, encoding="utf-8", newline="")

    log_with_context(
        "info",
        "问卷标签 CSV 已写入",
        module="files",
        action="export_survey_tags_command",
        context={"survey_group_id": survey_group_id, "path": str(target_path)},
    )
    click.echo(str(target_path))


def register_cli(app: Flask) -> None:
    """注册命令行命令."""
    app.cli.add_command(export_survey_tags_command)

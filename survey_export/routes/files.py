"""文件导出路由.

统一处理问卷标签的 CSV 下载接口.
"""

from __future__ import annotations

from flask import Blueprint, Response

from survey_export.constants import HttpHeaders
from survey_export.services.files.survey_tag_export_service import SurveyTagExportService
from survey_export.utils.route_safety import safe_route_call

# 创建蓝图
files_bp = Blueprint("files", __name__)
_survey_tag_export_service = SurveyTagExportService()


@files_bp.route("/api/survey-groups/<int:survey_group_id>/tags-export")
def export_survey_tags(survey_group_id: int) -> Response:
    """导出问卷组标签为 CSV.

    Returns:
        CSV 文件响应.

    Raises:
        NotFoundError: 问卷组不存在时抛出.
        SystemError: 导出失败时抛出.

    """

    def _execute() -> Response:
        result = _survey_tag_export_service.export_survey_tags_csv(survey_group_id)
        return Response(
            result.content,
            mimetype=result.mimetype,
            headers={HttpHeaders.CONTENT_DISPOSITION: f"attachment; filename={result.filename}"},
        )

    return safe_route_call(
        _execute,
        module="files",
        action="export_survey_tags",
        public_error="导出问卷标签失败",
        context={"survey_group_id": survey_group_id},
    )

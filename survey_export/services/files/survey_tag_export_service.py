"""问卷标签导出 Service.

职责:
- 组织 repository 调用并输出导出文件内容/文件名
- 不做 Query 细节、不返回 Response、不 commit
"""

from __future__ import annotations

from survey_export.errors import NotFoundError, ValidationError
from survey_export.repositories.survey_groups_repository import SurveyGroupsRepository
from survey_export.services.files.csv_export_result import CsvExportResult
from survey_export.services.files.survey_tag_exporter import SurveyTagExporter


class SurveyTagExportService:
    """问卷标签导出服务."""

    def __init__(
        self,
        repository: SurveyGroupsRepository | None = None,
        exporter_factory: type[SurveyTagExporter] | None = None,
    ) -> None:
        """初始化服务并注入问卷组仓库."""
        self._repository = repository or SurveyGroupsRepository()
        self._exporter_factory = exporter_factory or SurveyTagExporter

    def export_survey_tags_csv(self, survey_group_id: int) -> CsvExportResult:
        """导出问卷组下全部问卷标签为 CSV.

        Raises:
            ValidationError: 问卷组 ID 非正整数.
            NotFoundError: 问卷组不存在.

        """
        if survey_group_id <= 0:
            raise ValidationError("问卷组 ID 无效", extra={"survey_group_id": survey_group_id})

        survey_group = self._repository.get_by_id(survey_group_id)
        if survey_group is None:
            raise NotFoundError(message_key="SURVEY_GROUP_NOT_FOUND", extra={"survey_group_id": survey_group_id})

        exporter = self._exporter_factory(survey_group)
        content = exporter.export()
        return CsvExportResult(filename=exporter.filename(), content=content)

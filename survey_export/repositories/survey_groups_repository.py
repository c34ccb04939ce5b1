"""问卷组读模型 Repository.

职责:
- 仅负责 Query 组装与数据库读取
- 不做序列化、不返回 Response、不 commit
"""

from __future__ import annotations

from survey_export import db
from survey_export.models import SurveyGroup


class SurveyGroupsRepository:
    """问卷组查询 Repository."""

    @staticmethod
    def get_by_id(survey_group_id: int) -> SurveyGroup | None:
        return db.session.get(SurveyGroup, survey_group_id)

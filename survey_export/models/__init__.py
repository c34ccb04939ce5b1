"""数据模型模块.

主要模型:
- SurveyGroup: 问卷组模型
- Survey: 问卷模型
- SurveyTag: 问卷标签模型
"""

from .survey import Survey
from .survey_group import SurveyGroup
from .survey_tag import SurveyTag

__all__ = ["Survey", "SurveyGroup", "SurveyTag"]

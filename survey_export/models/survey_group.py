"""
问卷标签导出 - 问卷组模型
"""

from survey_export import db
from survey_export.utils.time_utils import time_utils


class SurveyGroup(db.Model):
    """问卷组模型。

    标签导出以问卷组为单位，导出文件名由问卷组名称派生。

    Attributes:
        id: 问卷组主键。
        name: 问卷组名称（如 Q3 Survey）。
        description: 描述信息。
        created_at: 创建时间。
        updated_at: 更新时间。
    """

    __tablename__ = "survey_groups"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=time_utils.now)
    updated_at = db.Column(db.DateTime(timezone=True), default=time_utils.now, onupdate=time_utils.now)

    # 关系
    surveys = db.relationship("Survey", back_populates="survey_group", lazy="dynamic")

    def __repr__(self) -> str:
        return f"<SurveyGroup {self.id}: {self.name}>"

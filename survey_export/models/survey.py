"""
问卷标签导出 - 问卷模型
"""

from survey_export import db
from survey_export.utils.time_utils import time_utils


class Survey(db.Model):
    """问卷模型。

    Attributes:
        id: 问卷主键。
        survey_group_id: 所属问卷组。
        title: 问卷标题。
        created_at: 创建时间。
    """

    __tablename__ = "surveys"

    id = db.Column(db.Integer, primary_key=True)
    survey_group_id = db.Column(db.Integer, db.ForeignKey("survey_groups.id"), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=time_utils.now)

    # 关系
    survey_group = db.relationship("SurveyGroup", back_populates="surveys")
    tags = db.relationship("SurveyTag", back_populates="survey", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Survey {self.id}: {self.title}>"

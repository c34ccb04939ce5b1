"""
问卷标签导出 - 问卷标签模型
"""

from survey_export import db
from survey_export.utils.time_utils import time_utils


class SurveyTag(db.Model):
    """问卷标签模型。

    导出 CSV 的每一行对应一条问卷标签记录。

    Attributes:
        id: 标签主键。
        survey_id: 所属问卷。
        name: 标签名称。
        category: 标签分类（如 topic、sentiment）。
        created_at: 创建时间。
    """

    __tablename__ = "survey_tags"

    id = db.Column(db.Integer, primary_key=True)
    survey_id = db.Column(db.Integer, db.ForeignKey("surveys.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    category = db.Column(db.String(50), nullable=True, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=time_utils.now)

    # 关系
    survey = db.relationship("Survey", back_populates="tags")

    def __repr__(self) -> str:
        return f"<SurveyTag {self.name}>"

# weekly_survey/models/survey.py
from sqlalchemy import (
    JSON, CheckConstraint, Column, DateTime, ForeignKey, Integer, SmallInteger, String, Text, func
)
from sqlalchemy.orm import relationship

from weekly_survey.db.base_class import Base


class Survey(Base):
    __tablename__ = "surveys"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    year = Column(Integer, nullable=False)
    semester = Column(SmallInteger, nullable=False)  # 1 | 2
    week = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("semester IN (1, 2)", name="ck_surveys_semester"),
    )

    questions = relationship(
        "Question",
        back_populates="survey",
        order_by="Question.order_index",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    submissions = relationship(
        "Submission",
        back_populates="survey",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True)
    survey_id = Column(Integer, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=True)
    config = Column(JSON, nullable=False)  # {"type": "star", "maxRating": 5} | {"type": "input", ...}
    order_index = Column(Integer, nullable=False, default=0)

    survey = relationship("Survey", back_populates="questions")
    answers = relationship("Answer", back_populates="question", passive_deletes=True)

    @property
    def question_type(self) -> str | None:
        return (self.config or {}).get("type")

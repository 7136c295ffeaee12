# weekly_survey/models/submission.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, UniqueConstraint, func
from sqlalchemy.orm import relationship

from weekly_survey.db.base_class import Base


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True)
    survey_id = Column(Integer, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # una sola respuesta por usuario y encuesta; la BD es el árbitro final
    __table_args__ = (
        UniqueConstraint("survey_id", "user_id", name="uq_submission_survey_user"),
    )

    survey = relationship("Survey", back_populates="submissions")
    user = relationship("User", back_populates="submissions")
    answers = relationship(
        "Answer",
        back_populates="submission",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Answer.id",
    )


class Answer(Base):
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    submission_id = Column(Integer, ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True)
    value = Column(Text, nullable=False)  # "4" para estrellas, texto libre para input

    question = relationship("Question", back_populates="answers")
    submission = relationship("Submission", back_populates="answers")

# weekly_survey/services/cross_insights.py
"""
Evolución de una misma pregunta a lo largo de varias encuestas.

"La misma pregunta" se empareja por POSICIÓN: el índice (order_index) de la
pregunta en la primera encuesta de la lista se busca en cada una de las demás.
Todas las preguntas emparejadas deben tener el mismo tipo.
"""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.orm import Session, selectinload

from weekly_survey.core.config import settings
from weekly_survey.models.submission import Answer, Submission
from weekly_survey.models.survey import Question, Survey
from weekly_survey.models.user import User
from weekly_survey.schemas.insights import (
    CrossInsightOut,
    CrossInsightUserOut,
    CrossSurveyAnswerOut,
)
from weekly_survey.services.errors import NotFound, QuestionTypeMismatch, ValidationFailed

logger = logging.getLogger(__name__)


def parse_survey_ids(raw: str | None) -> list[int]:
    """'1, 2,x,3' -> [1, 2, 3] (sin repetidos, conserva el orden)."""
    if not raw:
        raise ValidationFailed("Falta el parámetro surveys")
    ids: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part.isdigit():
            continue
        sid = int(part)
        if sid not in ids:
            ids.append(sid)
    if not ids:
        raise ValidationFailed("Parámetro surveys inválido")
    return ids


def match_questions(db: Session, question_id: int, survey_ids: Sequence[int]) -> tuple[int, dict[int, Question]]:
    """
    Devuelve (posición, {survey_id: Question}) para la pregunta equivalente de cada encuesta.
    """
    surveys = (
        db.query(Survey)
        .options(selectinload(Survey.questions))
        .filter(Survey.id.in_(list(survey_ids)))
        .all()
    )
    by_id = {s.id: s for s in surveys}
    missing = [str(sid) for sid in survey_ids if sid not in by_id]
    if missing:
        raise NotFound(f"Encuestas no encontradas: {', '.join(missing)}")

    base_questions = by_id[survey_ids[0]].questions
    position = next((i for i, q in enumerate(base_questions) if q.id == question_id), None)
    if position is None:
        raise NotFound("La pregunta no pertenece a la primera encuesta")

    base_type = base_questions[position].question_type
    matched: dict[int, Question] = {}
    for sid in survey_ids:
        questions = by_id[sid].questions
        if position >= len(questions):
            raise ValidationFailed(f"La encuesta {sid} no tiene pregunta en la posición {position + 1}")
        q = questions[position]
        if q.question_type != base_type:
            raise QuestionTypeMismatch(f"El tipo de la pregunta en la encuesta {sid} no coincide")
        matched[sid] = q
    return position, matched


def cross_survey_insight(
    db: Session,
    question_id: int,
    survey_ids: Sequence[int],
    user_limit: int | None = None,
) -> CrossInsightOut:
    user_limit = settings.CROSS_INSIGHT_USER_LIMIT if user_limit is None else user_limit
    position, matched = match_questions(db, question_id, survey_ids)
    question_type = matched[survey_ids[0]].question_type

    qids = [q.id for q in matched.values()]

    # primeros N usuarios (por id ascendente) con alguna respuesta a estas preguntas
    user_ids = [
        uid
        for (uid,) in db.query(Submission.user_id)
        .join(Answer, Answer.submission_id == Submission.id)
        .filter(Answer.question_id.in_(qids))
        .distinct()
        .order_by(Submission.user_id.asc())
        .limit(user_limit)
        .all()
    ]

    rows = []
    if user_ids:
        rows = (
            db.query(Answer, Submission, Survey, User)
            .join(Submission, Answer.submission_id == Submission.id)
            .join(Survey, Submission.survey_id == Survey.id)
            .join(User, Submission.user_id == User.id)
            .filter(Answer.question_id.in_(qids), Submission.user_id.in_(user_ids))
            .order_by(User.id.asc(), Survey.week.asc(), Survey.created_at.asc(), Survey.id.asc())
            .all()
        )

    users: dict[int, CrossInsightUserOut] = {}
    for answer, submission, survey, user in rows:
        entry = users.get(user.id)
        if entry is None:
            entry = users[user.id] = CrossInsightUserOut(
                id=user.id, name=user.name, id_number=user.id_number, role=user.role,
            )
        entry.surveys.append(CrossSurveyAnswerOut(
            survey_id=survey.id,
            week=survey.week,
            created_at=survey.created_at,
            value=answer.value,
        ))

    logger.debug(
        "cross insight q=%s posición=%s encuestas=%s usuarios=%d",
        question_id, position, list(survey_ids), len(users),
    )
    return CrossInsightOut(
        question_type=question_type,
        position=position,
        question_ids={sid: q.id for sid, q in matched.items()},
        users=list(users.values()),
    )

# weekly_survey/services/submissions.py
"""
Admisión de respuestas a una encuesta.

Orden de validación: encuesta existe -> longitudes de nombre/identificación ->
respuestas no vacías -> resolución de usuario -> duplicado -> validez de cada respuesta.
Solo si todo pasa se escribe Submission + Answers en una única transacción.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from weekly_survey.models.submission import Answer, Submission
from weekly_survey.models.survey import Question, Survey
from weekly_survey.models.user import ROLE_STUDENT, User
from weekly_survey.schemas.submission import AnswerIn
from weekly_survey.schemas.survey import InputConfig, StarConfig
from weekly_survey.services.errors import Conflict, NotFound, ValidationFailed
from weekly_survey.services.insights import parse_question_config, parse_rating

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
MAX_ID_NUMBER_LENGTH = 50


class UserResolutionStatus(str, enum.Enum):
    FOUND = "found"
    CREATED = "created"
    NAME_MISMATCH = "name_mismatch"


@dataclass
class UserResolution:
    status: UserResolutionStatus
    user: Optional[User] = None

    @property
    def ok(self) -> bool:
        return self.status != UserResolutionStatus.NAME_MISMATCH


# -------------------- helpers -------------------- #

def _ensure_survey(db: Session, survey_id: int) -> Survey:
    survey = (
        db.query(Survey)
        .options(selectinload(Survey.questions))
        .filter(Survey.id == survey_id)
        .first()
    )
    if not survey:
        raise NotFound("Encuesta no encontrada")
    return survey


def _validate_identity(name: str, id_number: str) -> tuple[str, str]:
    name = (name or "").strip()
    id_number = (id_number or "").strip()
    if not name or len(name) > MAX_NAME_LENGTH:
        raise ValidationFailed(f"El nombre debe tener entre 1 y {MAX_NAME_LENGTH} caracteres")
    if not id_number or len(id_number) > MAX_ID_NUMBER_LENGTH:
        raise ValidationFailed(f"La identificación debe tener entre 1 y {MAX_ID_NUMBER_LENGTH} caracteres")
    return name, id_number


def get_user_by_id_number(db: Session, id_number: str) -> Optional[User]:
    return db.query(User).filter(User.id_number == id_number).first()


def find_or_create_user(db: Session, name: str, id_number: str) -> UserResolution:
    """
    Busca por número de identificación; si no existe lo crea como estudiante.
    Si existe con otro nombre no toca nada y devuelve NAME_MISMATCH.
    No hace commit: el alta queda dentro de la transacción del llamador
    y se deshace si la submission no llega a guardarse.
    """
    user = get_user_by_id_number(db, id_number)
    if user:
        if user.name != name:
            return UserResolution(UserResolutionStatus.NAME_MISMATCH, user)
        return UserResolution(UserResolutionStatus.FOUND, user)

    user = User(name=name, id_number=id_number, role=ROLE_STUDENT)
    try:
        db.add(user)
        db.flush()
    except IntegrityError:
        # otro request creó el mismo id_number entre la consulta y el insert
        db.rollback()
        raise ValidationFailed(
            "Esta identificación ya está registrada por otro usuario; verifique nombre e identificación"
        )
    return UserResolution(UserResolutionStatus.CREATED, user)


def _resolve_user(db: Session, name: str, id_number: str) -> User:
    resolution = find_or_create_user(db, name, id_number)
    if not resolution.ok:
        raise ValidationFailed("El nombre no coincide con la identificación registrada")
    return resolution.user


def has_submitted(db: Session, survey_id: int, user_id: int) -> bool:
    return (
        db.query(Submission.id)
        .filter(Submission.survey_id == survey_id, Submission.user_id == user_id)
        .first()
        is not None
    )


def validate_answer_value(question: Question, value) -> str:
    """Devuelve el valor normalizado a texto o lanza ValidationFailed."""
    config = parse_question_config(question.config)

    if isinstance(config, StarConfig):
        rating = parse_rating(value)
        if rating is None or rating < 0 or rating > config.max_rating:
            raise ValidationFailed(
                f"La pregunta {question.id} admite valores entre 0 y {config.max_rating}"
            )
        return str(rating)

    # InputConfig
    text = "" if value is None else str(value)
    if config.max_length is not None and len(text) > config.max_length:
        raise ValidationFailed(
            f"La respuesta a la pregunta {question.id} supera el límite de {config.max_length} caracteres"
        )
    return text


def _validate_answers(survey: Survey, answers: Sequence[AnswerIn]) -> list[tuple[int, str]]:
    questions = {q.id: q for q in survey.questions}

    invalid = [a.question_id for a in answers if a.question_id not in questions]
    if invalid:
        raise ValidationFailed(f"IDs de pregunta inválidos: {', '.join(str(i) for i in invalid)}")

    seen: set[int] = set()
    for a in answers:
        if a.question_id in seen:
            raise ValidationFailed(f"Pregunta {a.question_id} respondida más de una vez")
        seen.add(a.question_id)

    return [(a.question_id, validate_answer_value(questions[a.question_id], a.value)) for a in answers]


def _add_answers(db: Session, submission: Submission, values: Iterable[tuple[int, str]]) -> None:
    for question_id, value in values:
        submission.answers.append(Answer(question_id=question_id, value=value))


# -------------------- operaciones -------------------- #

def admit_submission(
    db: Session,
    *,
    survey_id: int,
    name: str,
    id_number: str,
    answers: Sequence[AnswerIn],
) -> Submission:
    survey = _ensure_survey(db, survey_id)
    name, id_number = _validate_identity(name, id_number)
    if not answers:
        raise ValidationFailed("Debe enviar al menos una respuesta")

    try:
        user = _resolve_user(db, name, id_number)

        if has_submitted(db, survey.id, user.id):
            raise Conflict("Ya respondió esta encuesta")

        values = _validate_answers(survey, answers)

        submission = Submission(survey_id=survey.id, user_id=user.id)
        db.add(submission)
        _add_answers(db, submission, values)
        db.commit()
    except IntegrityError:
        # carrera con otro request del mismo usuario: gana la restricción única
        db.rollback()
        raise Conflict("Ya respondió esta encuesta")
    except Exception:
        db.rollback()
        raise

    db.refresh(submission)
    logger.info(
        "submission %s creada: survey=%s user=%s answers=%d",
        submission.id, survey.id, user.id, len(values),
    )
    return submission


def override_submission(
    db: Session,
    *,
    survey_id: int,
    name: str,
    id_number: str,
    answers: Sequence[AnswerIn],
) -> Submission:
    """
    Reemplaza las respuestas de una submission existente (borra y recrea en la misma transacción).
    """
    survey = _ensure_survey(db, survey_id)
    name, id_number = _validate_identity(name, id_number)
    if not answers:
        raise ValidationFailed("Debe enviar al menos una respuesta")

    user = get_user_by_id_number(db, id_number)
    if not user:
        raise NotFound("Usuario no encontrado")
    if user.name != name:
        raise ValidationFailed("El nombre no coincide con la identificación registrada")

    submission = (
        db.query(Submission)
        .filter(Submission.survey_id == survey.id, Submission.user_id == user.id)
        .first()
    )
    if not submission:
        raise NotFound("El usuario no ha respondido esta encuesta")

    values = _validate_answers(survey, answers)
    try:
        submission.answers.clear()
        db.flush()
        _add_answers(db, submission, values)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(submission)
    logger.info("submission %s reemplazada: %d respuestas", submission.id, len(values))
    return submission


def check_submission(db: Session, survey_id: int, name: str, id_number: str) -> bool:
    _ensure_survey(db, survey_id)
    user = (
        db.query(User)
        .filter(User.id_number == (id_number or "").strip(), User.name == (name or "").strip())
        .first()
    )
    if not user:
        return False
    return has_submitted(db, survey_id, user.id)

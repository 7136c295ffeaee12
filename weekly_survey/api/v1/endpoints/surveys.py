# weekly_survey/api/v1/endpoints/surveys.py
from __future__ import annotations

import logging
from io import BytesIO
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from weekly_survey.core.security import get_admin_user
from weekly_survey.db.session import get_db
from weekly_survey.models.submission import Answer, Submission
from weekly_survey.models.survey import Question, Survey
from weekly_survey.schemas.insights import QuestionInsightOut
from weekly_survey.schemas.submission import SubmissionOut, SurveyResultsOut
from weekly_survey.schemas.survey import (
    CheckSubmissionIn,
    CheckSubmissionOut,
    QuestionIn,
    SurveyIn,
    SurveyListItem,
    SurveyListOut,
    SurveyOut,
    dump_config,
)
from weekly_survey.services.errors import SurveyServiceError
from weekly_survey.services.insights import generate_question_insight
from weekly_survey.services.submissions import check_submission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/surveys", tags=["surveys"])


# -------------------- helpers -------------------- #

def _ensure_survey(db: Session, survey_id: int, with_questions: bool = True) -> Survey:
    query = db.query(Survey)
    if with_questions:
        query = query.options(selectinload(Survey.questions))
    s = query.filter(Survey.id == survey_id).first()
    if not s:
        raise HTTPException(status_code=404, detail="Encuesta no encontrada")
    return s


def _build_questions(questions: List[QuestionIn]) -> list[Question]:
    # order_index = posición en la lista recibida
    return [
        Question(description=q.description, config=dump_config(q.config), order_index=i)
        for i, q in enumerate(questions)
    ]


def _count_submissions(db: Session, survey_id: int) -> int:
    return (
        db.query(func.count(Submission.id))
        .filter(Submission.survey_id == survey_id)
        .scalar()
    ) or 0


# -------------------- endpoints -------------------- #

@router.get("", response_model=SurveyListOut)
def list_surveys(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    total = db.query(func.count(Survey.id)).scalar() or 0

    question_count = (
        db.query(func.count(Question.id))
        .filter(Question.survey_id == Survey.id)
        .correlate(Survey)
        .scalar_subquery()
    )
    submission_count = (
        db.query(func.count(Submission.id))
        .filter(Submission.survey_id == Survey.id)
        .correlate(Survey)
        .scalar_subquery()
    )

    rows = (
        db.query(Survey, question_count.label("question_count"), submission_count.label("submission_count"))
        .order_by(Survey.created_at.desc(), Survey.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    surveys = [
        SurveyListItem(
            id=s.id,
            title=s.title,
            description=s.description,
            year=s.year,
            semester=s.semester,
            week=s.week,
            created_at=s.created_at,
            question_count=int(nq or 0),
            submission_count=int(ns or 0),
        )
        for s, nq, ns in rows
    ]
    return SurveyListOut(surveys=surveys, total=total, page=page, limit=limit)


@router.get("/{survey_id}", response_model=SurveyOut)
def get_survey(
    survey_id: int = Path(..., description="ID de la encuesta"),
    db: Session = Depends(get_db),
):
    return _ensure_survey(db, survey_id)


@router.post("", response_model=SurveyOut, status_code=status.HTTP_201_CREATED)
def create_survey(
    payload: SurveyIn,
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    survey = Survey(
        title=payload.title.strip(),
        description=payload.description,
        year=payload.year,
        semester=payload.semester,
        week=payload.week,
        questions=_build_questions(payload.questions),
    )
    db.add(survey)
    db.commit()
    db.refresh(survey)

    logger.info("encuesta %s creada por admin %s (%d preguntas)", survey.id, admin.id, len(payload.questions))
    return survey


@router.put("/{survey_id}", response_model=SurveyOut)
def update_survey(
    survey_id: int = Path(..., description="ID de la encuesta"),
    payload: SurveyIn = ...,
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    survey = _ensure_survey(db, survey_id)

    # con respuestas ya recibidas, las preguntas no se pueden reemplazar
    if _count_submissions(db, survey_id):
        raise HTTPException(status_code=409, detail="La encuesta ya tiene respuestas y no se puede editar")

    survey.title = payload.title.strip()
    survey.description = payload.description
    survey.year = payload.year
    survey.semester = payload.semester
    survey.week = payload.week

    survey.questions.clear()
    db.flush()
    survey.questions.extend(_build_questions(payload.questions))

    db.commit()
    db.refresh(survey)
    logger.info("encuesta %s reemplazada por admin %s", survey.id, admin.id)
    return survey


@router.delete("/{survey_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_survey(
    survey_id: int = Path(..., description="ID de la encuesta"),
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    survey = _ensure_survey(db, survey_id, with_questions=False)
    db.delete(survey)
    db.commit()
    logger.info("encuesta %s eliminada por admin %s", survey_id, admin.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{survey_id}/check", response_model=CheckSubmissionOut)
def check_survey_submission(
    survey_id: int = Path(..., description="ID de la encuesta"),
    payload: CheckSubmissionIn = ...,
    db: Session = Depends(get_db),
):
    try:
        submitted = check_submission(db, survey_id, payload.name, payload.id_number)
    except SurveyServiceError as exc:
        raise exc.to_http()
    return CheckSubmissionOut(has_submitted=submitted)


@router.get("/{survey_id}/results", response_model=SurveyResultsOut)
def survey_results(
    survey_id: int = Path(..., description="ID de la encuesta"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    _admin=Depends(get_admin_user),
):
    survey = _ensure_survey(db, survey_id)
    total = _count_submissions(db, survey_id)

    submissions = (
        db.query(Submission)
        .options(selectinload(Submission.user), selectinload(Submission.answers))
        .filter(Submission.survey_id == survey_id)
        .order_by(Submission.created_at.desc(), Submission.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return SurveyResultsOut(
        survey=SurveyOut.model_validate(survey),
        submissions=[SubmissionOut.model_validate(s) for s in submissions],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/{survey_id}/results/export.xlsx")
def export_results_xlsx(
    survey_id: int = Path(..., description="ID de la encuesta"),
    db: Session = Depends(get_db),
    _admin=Depends(get_admin_user),
):
    survey = _ensure_survey(db, survey_id)
    questions = list(survey.questions)

    submissions = (
        db.query(Submission)
        .options(selectinload(Submission.user), selectinload(Submission.answers))
        .filter(Submission.survey_id == survey_id)
        .order_by(Submission.created_at.asc(), Submission.id.asc())
        .all()
    )

    # ---------- Excel ----------
    wb = Workbook()
    ws_info = wb.active; ws_info.title = "Encuesta"
    ws_info.append(["id", "titulo", "anio", "semestre", "semana", "respuestas"])
    ws_info.append([survey.id, survey.title, survey.year, survey.semester, survey.week, len(submissions)])

    ws_r = wb.create_sheet("Respuestas")
    ws_r.append(
        ["submission_id", "nombre", "identificacion", "enviado"]
        + [f"P{i + 1} {q.description or ''}".strip() for i, q in enumerate(questions)]
    )
    for sub in submissions:
        by_question = {a.question_id: a.value for a in sub.answers}
        ws_r.append(
            [sub.id, sub.user.name, sub.user.id_number,
             sub.created_at.isoformat() if sub.created_at else None]
            + [by_question.get(q.id) for q in questions]
        )

    # Guardar en memoria y responder
    buf = BytesIO(); wb.save(buf); buf.seek(0)
    filename = f"survey_{survey_id}.xlsx"
    return StreamingResponse(iter([buf.getvalue()]),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'})


@router.get("/{survey_id}/insights/{question_id}", response_model=QuestionInsightOut)
def question_insight(
    survey_id: int = Path(..., description="ID de la encuesta"),
    question_id: int = Path(..., description="ID de la pregunta"),
    db: Session = Depends(get_db),
    _admin=Depends(get_admin_user),
):
    _ensure_survey(db, survey_id, with_questions=False)

    q = db.query(Question).filter(Question.id == question_id, Question.survey_id == survey_id).first()
    if not q:
        raise HTTPException(status_code=404, detail="Pregunta no encontrada en esta encuesta")

    answers = db.query(Answer).filter(Answer.question_id == q.id).all()
    try:
        return generate_question_insight(q.id, q.config, answers)
    except SurveyServiceError as exc:
        raise exc.to_http()

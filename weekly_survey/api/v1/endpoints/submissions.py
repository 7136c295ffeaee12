# weekly_survey/api/v1/endpoints/submissions.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from weekly_survey.core.security import get_admin_user
from weekly_survey.db.session import get_db
from weekly_survey.schemas.submission import SubmissionIn, SubmissionOut
from weekly_survey.services.errors import SurveyServiceError
from weekly_survey.services.submissions import admit_submission, override_submission

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.post("", response_model=SubmissionOut, status_code=status.HTTP_201_CREATED)
def submit_answers(payload: SubmissionIn, db: Session = Depends(get_db)):
    """
    Registra las respuestas de un estudiante (una sola vez por encuesta).
    201 creada | 400 datos inválidos | 404 encuesta inexistente | 409 ya respondió.
    """
    try:
        return admit_submission(
            db,
            survey_id=payload.survey_id,
            name=payload.user.name,
            id_number=payload.user.id_number,
            answers=payload.answers,
        )
    except SurveyServiceError as exc:
        raise exc.to_http()


@router.put("", response_model=SubmissionOut)
def override_answers(
    payload: SubmissionIn,
    db: Session = Depends(get_db),
    _admin=Depends(get_admin_user),
):
    """Reemplaza todas las respuestas de una submission existente."""
    try:
        return override_submission(
            db,
            survey_id=payload.survey_id,
            name=payload.user.name,
            id_number=payload.user.id_number,
            answers=payload.answers,
        )
    except SurveyServiceError as exc:
        raise exc.to_http()

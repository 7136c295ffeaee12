# weekly_survey/api/v1/endpoints/insights.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from weekly_survey.core.security import get_admin_user
from weekly_survey.db.session import get_db
from weekly_survey.schemas.insights import CrossInsightOut
from weekly_survey.services.cross_insights import cross_survey_insight, parse_survey_ids
from weekly_survey.services.errors import SurveyServiceError

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("/{question_id}", response_model=CrossInsightOut)
def cross_insight(
    question_id: int = Path(..., description="ID de la pregunta en la primera encuesta"),
    surveys: str | None = Query(None, description="IDs de encuestas separados por coma, p.ej. 1,2,3"),
    db: Session = Depends(get_db),
    _admin=Depends(get_admin_user),
):
    try:
        survey_ids = parse_survey_ids(surveys)
        return cross_survey_insight(db, question_id, survey_ids)
    except SurveyServiceError as exc:
        raise exc.to_http()

# weekly_survey/schemas/submission.py
from __future__ import annotations

from datetime import datetime
from typing import List, Union

from pydantic import Field, StrictInt, StrictStr

from weekly_survey.schemas.common import CamelModel, UserOut
from weekly_survey.schemas.survey import SurveyOut


# ---------- Entradas ----------

class SubmissionUserIn(CamelModel):
    # los límites de longitud se validan en el servicio (400, no 422)
    name: str
    id_number: str


class AnswerIn(CamelModel):
    question_id: int
    # estricto: un booleano JSON no se convierte en 1
    value: Union[StrictInt, StrictStr]  # 4 | "4" para estrellas, texto para input


class SubmissionIn(CamelModel):
    survey_id: int
    user: SubmissionUserIn
    answers: List[AnswerIn] = Field(default_factory=list)


# ---------- Salidas ----------

class AnswerOut(CamelModel):
    id: int
    question_id: int
    value: str


class SubmissionOut(CamelModel):
    id: int
    survey_id: int
    created_at: datetime
    user: UserOut
    answers: List[AnswerOut] = Field(default_factory=list)


class SurveyResultsOut(CamelModel):
    survey: SurveyOut
    submissions: List[SubmissionOut]
    total: int
    page: int
    limit: int

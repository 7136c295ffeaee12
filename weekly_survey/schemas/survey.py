# weekly_survey/schemas/survey.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from weekly_survey.schemas.common import CamelModel

QUESTION_TYPE_STAR = "star"
QUESTION_TYPE_INPUT = "input"


# -------- Configuración de preguntas (unión discriminada por "type") --------

class StarConfig(CamelModel):
    type: Literal["star"] = QUESTION_TYPE_STAR
    max_rating: int = Field(5, ge=1, le=10, description="Calificación máxima (0..maxRating)")


class InputConfig(CamelModel):
    type: Literal["input"] = QUESTION_TYPE_INPUT
    multiline: Optional[bool] = None
    max_length: Optional[int] = Field(None, gt=0, description="Longitud máxima del texto")


QuestionConfig = Annotated[Union[StarConfig, InputConfig], Field(discriminator="type")]

question_config_adapter: TypeAdapter[StarConfig | InputConfig] = TypeAdapter(QuestionConfig)


def dump_config(config: StarConfig | InputConfig) -> dict:
    """Forma en la que se guarda la configuración en la columna JSON."""
    return config.model_dump(by_alias=True, exclude_none=True)


# -------- Entradas --------

class QuestionIn(CamelModel):
    description: Optional[str] = None
    config: QuestionConfig


class SurveyIn(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    year: int = Field(..., ge=2020, le=2100)
    semester: int = Field(..., ge=1, le=2)
    week: int = Field(..., ge=1, le=30)
    questions: List[QuestionIn] = Field(..., min_length=1, max_length=50)


class CheckSubmissionIn(CamelModel):
    name: str
    id_number: str


# -------- Salidas --------

class QuestionOut(CamelModel):
    id: int
    survey_id: int
    description: Optional[str] = None
    config: QuestionConfig
    order_index: int


class SurveyOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    year: int
    semester: int
    week: int
    created_at: datetime
    questions: List[QuestionOut] = Field(default_factory=list)


class SurveyListItem(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    year: int
    semester: int
    week: int
    created_at: datetime
    question_count: int = 0
    submission_count: int = 0


class SurveyListOut(CamelModel):
    surveys: List[SurveyListItem]
    total: int
    page: int
    limit: int


class CheckSubmissionOut(CamelModel):
    has_submitted: bool

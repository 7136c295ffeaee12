# weekly_survey/schemas/insights.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Dict, List, Literal, Union

from pydantic import Field

from weekly_survey.schemas.common import CamelModel


class WordOut(CamelModel):
    text: str
    weight: int


class WordCloudInsightOut(CamelModel):
    type: Literal["wordcloud"] = "wordcloud"
    question_id: int
    question_type: Literal["input"] = "input"
    words: List[WordOut] = Field(default_factory=list)
    total_responses: int


class StarDistributionInsightOut(CamelModel):
    type: Literal["star_distribution"] = "star_distribution"
    question_id: int
    question_type: Literal["star"] = "star"
    distribution: Dict[int, int]
    total_responses: int
    average: float


QuestionInsightOut = Annotated[
    Union[WordCloudInsightOut, StarDistributionInsightOut],
    Field(discriminator="type"),
]


# ---------- Cross-survey ----------

class CrossSurveyAnswerOut(CamelModel):
    survey_id: int
    week: int
    created_at: datetime
    value: str


class CrossInsightUserOut(CamelModel):
    id: int
    name: str
    id_number: str
    role: str
    surveys: List[CrossSurveyAnswerOut] = Field(default_factory=list)


class CrossInsightOut(CamelModel):
    question_type: str
    position: int
    question_ids: Dict[int, int]  # survey_id -> question_id emparejada
    users: List[CrossInsightUserOut] = Field(default_factory=list)

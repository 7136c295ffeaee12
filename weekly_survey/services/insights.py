# weekly_survey/services/insights.py
"""
Resúmenes por pregunta (sin estado, sin efectos secundarios):

- estrellas: histograma 0..maxRating + promedio a 2 decimales;
- texto libre: frecuencia de palabras (segmentación con jieba) para la nube de palabras.
"""
from __future__ import annotations

import logging
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping

import jieba
from pydantic import ValidationError

from weekly_survey.core.config import settings
from weekly_survey.schemas.insights import (
    StarDistributionInsightOut,
    WordCloudInsightOut,
    WordOut,
)
from weekly_survey.schemas.survey import (
    QUESTION_TYPE_INPUT,
    QUESTION_TYPE_STAR,
    InputConfig,
    StarConfig,
    question_config_adapter,
)
from weekly_survey.services.errors import InvalidQuestionConfig, UnsupportedQuestionType

jieba.setLogLevel(logging.WARNING)  # silencia "Building prefix dict..." en cada arranque

DEFAULT_MAX_RATING = 5


def parse_question_config(raw: Mapping[str, Any] | StarConfig | InputConfig) -> StarConfig | InputConfig:
    """Convierte la config guardada (JSON) en StarConfig | InputConfig."""
    if isinstance(raw, (StarConfig, InputConfig)):
        return raw
    question_type = (raw or {}).get("type") if isinstance(raw, Mapping) else raw
    try:
        return question_config_adapter.validate_python(raw or {})
    except ValidationError:
        if question_type in (QUESTION_TYPE_STAR, QUESTION_TYPE_INPUT):
            raise InvalidQuestionConfig(question_type)
        raise UnsupportedQuestionType(question_type)


def _answer_value(answer: Any) -> Any:
    return getattr(answer, "value", answer)


def parse_rating(value: Any) -> int | None:
    """'4' / 4 -> 4; cualquier otra cosa -> None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def tokenize(text: str) -> list[str]:
    """Segmenta (modo preciso) y descarta tokens de longitud <= 1."""
    words = []
    for token in jieba.lcut(text, cut_all=False):
        token = token.strip()
        if len(token) > 1:
            words.append(token)
    return words


def generate_word_cloud(answers: Iterable[Any], limit: int | None = None) -> list[WordOut]:
    limit = settings.WORD_CLOUD_LIMIT if limit is None else limit
    freq: Counter[str] = Counter()
    for answer in answers:
        text = str(_answer_value(answer) or "").strip()
        if not text:
            continue
        freq.update(tokenize(text))

    # most_common es estable: a igual peso, gana la palabra vista primero
    return [WordOut(text=word, weight=n) for word, n in freq.most_common(limit)]


def generate_star_distribution(answers: Iterable[Any], max_rating: int = DEFAULT_MAX_RATING) -> dict:
    distribution = {star: 0 for star in range(max_rating + 1)}
    total = 0
    valid = 0

    for answer in answers:
        rating = parse_rating(_answer_value(answer))
        if rating is None or rating < 0 or rating > max_rating:
            continue
        distribution[rating] += 1
        total += rating
        valid += 1

    average = total / valid if valid else 0
    # mitades hacia arriba (4.125 -> 4.13), no redondeo bancario
    average = float(Decimal(str(average)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    return {
        "distribution": distribution,
        "total_responses": valid,
        "average": average,
    }


def generate_question_insight(question_id: int, config, answers: list) -> WordCloudInsightOut | StarDistributionInsightOut:
    config = parse_question_config(config)

    if isinstance(config, InputConfig):
        return WordCloudInsightOut(
            question_id=question_id,
            words=generate_word_cloud(answers),
            total_responses=len(answers),
        )
    if isinstance(config, StarConfig):
        return StarDistributionInsightOut(
            question_id=question_id,
            **generate_star_distribution(answers, config.max_rating or DEFAULT_MAX_RATING),
        )

    raise UnsupportedQuestionType(getattr(config, "type", None))

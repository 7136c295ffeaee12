# weekly_survey/services/errors.py
from __future__ import annotations

from fastapi import HTTPException, status


class SurveyServiceError(Exception):
    """Error de negocio; el endpoint lo traduce a HTTPException con su status."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_http(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.detail)


class ValidationFailed(SurveyServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(SurveyServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(SurveyServiceError):
    status_code = status.HTTP_409_CONFLICT


class UnsupportedQuestionType(ValidationFailed):
    """La configuración de la pregunta trae un 'type' que no sabemos resumir."""

    def __init__(self, question_type):
        super().__init__(f"Tipo de pregunta no soportado: {question_type}")
        self.question_type = question_type


class QuestionTypeMismatch(ValidationFailed):
    pass


class InvalidQuestionConfig(ValidationFailed):
    """El 'type' es conocido pero sus parámetros no son válidos."""

    def __init__(self, question_type):
        super().__init__(f"Configuración inválida para pregunta de tipo {question_type}")
        self.question_type = question_type

# weekly_survey/schemas/common.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base de todos los esquemas de la API: JSON en camelCase (idNumber, maxRating...)
    y atributos en snake_case. Acepta ambos nombres al entrar y se puede
    construir desde objetos SQLAlchemy.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserOut(CamelModel):
    id: int
    name: str
    id_number: str
    role: str

# weekly_survey/db/base.py
from weekly_survey.db.base_class import Base  # noqa: F401

# Importa todos los modelos que definen tablas (no pydantic)
# para que Base.metadata los conozca (Alembic / init_db).
from weekly_survey.models import user  # noqa: F401
from weekly_survey.models import survey  # noqa: F401
from weekly_survey.models import submission  # noqa: F401

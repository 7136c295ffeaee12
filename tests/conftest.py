import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from weekly_survey.core.security import hash_password, token_for_user
from weekly_survey.db.base import Base
from weekly_survey.db.session import build_engine, get_db
from weekly_survey.main import app
from weekly_survey.models.user import ROLE_ADMIN, ROLE_STUDENT, User

ADMIN_PASSWORD = "secreto123"


@pytest.fixture
def engine():
    eng = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin(db):
    user = User(name="Admin", id_number="ADMIN", role=ROLE_ADMIN, password_hash=hash_password(ADMIN_PASSWORD))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {token_for_user(admin)}"}


@pytest.fixture
def student_headers(db):
    user = User(name="Zhang", id_number="S-001", role=ROLE_STUDENT)
    db.add(user)
    db.commit()
    db.refresh(user)
    return {"Authorization": f"Bearer {token_for_user(user)}"}


def survey_payload(week=1, questions=None, **overrides):
    payload = {
        "title": f"Semana {week}",
        "description": "Encuesta semanal",
        "year": 2025,
        "semester": 1,
        "week": week,
        "questions": questions if questions is not None else [
            {"description": "¿Qué tal la clase?", "config": {"type": "star", "maxRating": 5}},
            {"description": "Comentarios", "config": {"type": "input", "maxLength": 10}},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_survey(client, admin_headers):
    def _create(**kwargs):
        resp = client.post("/api/surveys", json=survey_payload(**kwargs), headers=admin_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _create


@pytest.fixture
def survey(create_survey):
    return create_survey()


@pytest.fixture
def submit(client):
    def _submit(survey_id, answers, name="Zhang", id_number="001"):
        return client.post("/api/submissions", json={
            "surveyId": survey_id,
            "user": {"name": name, "idNumber": id_number},
            "answers": answers,
        })
    return _submit

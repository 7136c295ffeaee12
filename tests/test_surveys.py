from io import BytesIO

from openpyxl import load_workbook

from weekly_survey.models.submission import Answer, Submission
from weekly_survey.models.survey import Question

from .conftest import survey_payload


def test_create_requires_admin(client, student_headers):
    assert client.post("/api/surveys", json=survey_payload()).status_code == 401
    assert client.post("/api/surveys", json=survey_payload(), headers=student_headers).status_code == 403
    assert client.post(
        "/api/surveys", json=survey_payload(), headers={"Authorization": "Bearer basura"}
    ).status_code == 401


def test_create_and_read_back_keeps_order_and_config(client, create_survey):
    questions = [
        {"description": "q1", "config": {"type": "input", "multiline": True, "maxLength": 200}},
        {"description": "q2", "config": {"type": "star", "maxRating": 10}},
        {"config": {"type": "star"}},
        {"description": "q4", "config": {"type": "input"}},
    ]
    created = create_survey(questions=questions)

    resp = client.get(f"/api/surveys/{created['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Semana 1"
    assert [q["orderIndex"] for q in body["questions"]] == [0, 1, 2, 3]
    assert [q["description"] for q in body["questions"]] == ["q1", "q2", None, "q4"]
    assert body["questions"][0]["config"] == {"type": "input", "multiline": True, "maxLength": 200}
    assert body["questions"][1]["config"] == {"type": "star", "maxRating": 10}
    assert body["questions"][2]["config"] == {"type": "star", "maxRating": 5}
    assert body["questions"][3]["config"]["type"] == "input"


def test_create_validation(client, admin_headers):
    bad = [
        survey_payload(semester=3),
        survey_payload(week=0),
        survey_payload(title=""),
        survey_payload(questions=[]),
        survey_payload(questions=[{"config": {"type": "matrix"}}]),
        survey_payload(questions=[{"config": {"type": "star", "maxRating": 0}}]),
        survey_payload(questions=[{"config": {"type": "input", "maxLength": 0}}]),
    ]
    for payload in bad:
        assert client.post("/api/surveys", json=payload, headers=admin_headers).status_code == 422


def test_get_missing_survey(client):
    assert client.get("/api/surveys/999").status_code == 404


def test_list_is_paginated(client, create_survey, submit):
    created = [create_survey(week=w) for w in range(1, 6)]
    submit(created[0]["id"], [{"questionId": created[0]["questions"][0]["id"], "value": 3}])

    resp = client.get("/api/surveys", params={"page": 1, "limit": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 5
    assert body["page"] == 1
    assert body["limit"] == 2
    # más recientes primero
    assert [s["week"] for s in body["surveys"]] == [5, 4]
    assert body["surveys"][0]["questionCount"] == 2

    last = client.get("/api/surveys", params={"page": 3, "limit": 2}).json()
    assert [s["week"] for s in last["surveys"]] == [1]
    assert last["surveys"][0]["submissionCount"] == 1

    assert client.get("/api/surveys", params={"limit": 0}).status_code == 422


def test_update_replaces_questions(client, survey, admin_headers, db):
    payload = survey_payload(
        week=7,
        questions=[{"description": "nueva", "config": {"type": "star", "maxRating": 3}}],
    )
    resp = client.put(f"/api/surveys/{survey['id']}", json=payload, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["week"] == 7
    assert len(body["questions"]) == 1
    assert body["questions"][0]["config"] == {"type": "star", "maxRating": 3}
    assert db.query(Question).filter(Question.survey_id == survey["id"]).count() == 1


def test_update_rejected_once_answered(client, survey, admin_headers, submit):
    submit(survey["id"], [{"questionId": survey["questions"][0]["id"], "value": 4}])
    resp = client.put(f"/api/surveys/{survey['id']}", json=survey_payload(week=2), headers=admin_headers)
    assert resp.status_code == 409
    assert len(client.get(f"/api/surveys/{survey['id']}").json()["questions"]) == 2


def test_delete_cascades(client, survey, admin_headers, submit, db):
    submit(survey["id"], [{"questionId": survey["questions"][0]["id"], "value": 4}])
    assert client.delete(f"/api/surveys/{survey['id']}").status_code == 401

    resp = client.delete(f"/api/surveys/{survey['id']}", headers=admin_headers)
    assert resp.status_code == 204
    assert client.get(f"/api/surveys/{survey['id']}").status_code == 404
    assert db.query(Question).count() == 0
    assert db.query(Submission).count() == 0
    assert db.query(Answer).count() == 0


def test_check_submission(client, survey, submit):
    url = f"/api/surveys/{survey['id']}/check"
    assert client.post(url, json={"name": "Zhang", "idNumber": "001"}).json() == {"hasSubmitted": False}
    submit(survey["id"], [{"questionId": survey["questions"][0]["id"], "value": 4}])
    assert client.post(url, json={"name": "Zhang", "idNumber": "001"}).json() == {"hasSubmitted": True}
    assert client.post(url, json={"name": "Otro", "idNumber": "001"}).json() == {"hasSubmitted": False}
    assert client.post("/api/surveys/999/check", json={"name": "Zhang", "idNumber": "001"}).status_code == 404


def test_results_are_paginated(client, survey, submit, admin_headers):
    for i in range(3):
        r = submit(survey["id"], [{"questionId": survey["questions"][0]["id"], "value": i}],
                   name=f"Alumno {i}", id_number=f"10{i}")
        assert r.status_code == 201

    url = f"/api/surveys/{survey['id']}/results"
    assert client.get(url).status_code == 401

    body = client.get(url, params={"page": 1, "limit": 2}, headers=admin_headers).json()
    assert body["total"] == 3
    assert body["survey"]["id"] == survey["id"]
    assert len(body["survey"]["questions"]) == 2
    assert len(body["submissions"]) == 2
    assert body["submissions"][0]["user"]["idNumber"] == "102"
    assert body["submissions"][0]["answers"][0]["value"] == "2"

    second = client.get(url, params={"page": 2, "limit": 2}, headers=admin_headers).json()
    assert [s["user"]["idNumber"] for s in second["submissions"]] == ["100"]


def test_results_export_xlsx(client, survey, submit, admin_headers):
    submit(survey["id"], [
        {"questionId": survey["questions"][0]["id"], "value": 5},
        {"questionId": survey["questions"][1]["id"], "value": "genial"},
    ])
    resp = client.get(f"/api/surveys/{survey['id']}/results/export.xlsx", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )

    wb = load_workbook(BytesIO(resp.content))
    rows = list(wb["Respuestas"].iter_rows(values_only=True))
    assert rows[0][:3] == ("submission_id", "nombre", "identificacion")
    assert rows[1][1:3] == ("Zhang", "001")
    assert rows[1][4:] == ("5", "genial")


def test_question_insight_endpoint(client, survey, submit, admin_headers):
    star_id = survey["questions"][0]["id"]
    for i, v in enumerate([5, 4, 5, 3, 5]):
        submit(survey["id"], [{"questionId": star_id, "value": v}], name=f"A{i}", id_number=f"20{i}")

    url = f"/api/surveys/{survey['id']}/insights/{star_id}"
    assert client.get(url).status_code == 401

    body = client.get(url, headers=admin_headers).json()
    assert body["type"] == "star_distribution"
    assert body["questionType"] == "star"
    assert body["distribution"] == {"0": 0, "1": 0, "2": 0, "3": 1, "4": 1, "5": 3}
    assert body["average"] == 4.4
    assert body["totalResponses"] == 5

    text_id = survey["questions"][1]["id"]
    submit(survey["id"], [{"questionId": text_id, "value": "good good"}], name="B", id_number="300")
    words = client.get(f"/api/surveys/{survey['id']}/insights/{text_id}", headers=admin_headers).json()
    assert words["type"] == "wordcloud"
    assert words["totalResponses"] == 1
    assert words["words"] == [{"text": "good", "weight": 2}]


def test_question_insight_unknown_question(client, survey, create_survey, admin_headers):
    other = create_survey(week=2)
    url = f"/api/surveys/{survey['id']}/insights/{other['questions'][0]['id']}"
    assert client.get(url, headers=admin_headers).status_code == 404


def test_question_insight_unsupported_type(client, survey, admin_headers, db):
    q = Question(survey_id=survey["id"], config={"type": "matrix"}, order_index=9)
    db.add(q)
    db.commit()
    resp = client.get(f"/api/surveys/{survey['id']}/insights/{q.id}", headers=admin_headers)
    assert resp.status_code == 400

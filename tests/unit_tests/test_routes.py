import datetime

import pytest
import sqlalchemy

from src.models.db.evaluation_session import EvaluationSession, SessionStatusEnum
from src.securities.authorizations.jwt import jwt_generator
from src.services.session_lifecycle import utc_now

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


async def _create_question(client, headers, title: str) -> dict:
    resp = await client.post("/api/questions", headers=headers, json={"title": title, "content": f"# {title}"})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _create_session_fixture(client, headers) -> tuple[dict, list[dict], dict]:
    candidate = (
        await client.post("/api/candidates", headers=headers, json={"email": "jane.doe@example.com", "name": "Jane"})
    ).json()
    questions = [await _create_question(client, headers, title) for title in ("Closures", "Promises")]
    template = (
        await client.post(
            "/api/templates",
            headers=headers,
            json={"name": "JavaScript Basics", "questionIds": [questions[1]["id"], questions[0]["id"]]},
        )
    ).json()
    return candidate, questions, template


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_login_refresh_and_logout(client, admin_account):
    resp = await client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 202
    body = resp.json()
    assert body["admin"]["role"] == "admin"
    assert body["admin"]["displayName"] == "Ada Admin"
    assert body["token"]
    refresh_token = body["refreshToken"]

    resp = await client.post("/api/auth/refresh", json={"refreshToken": refresh_token})
    assert resp.status_code == 200
    assert resp.json()["token"]

    resp = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert resp.status_code == 200
    assert resp.json()["admin"]["email"] == ADMIN_EMAIL

    resp = await client.post("/api/auth/logout", json={"refreshToken": refresh_token})
    assert resp.status_code == 204
    resp = await client.post("/api/auth/refresh", json={"refreshToken": refresh_token})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_login_rejects_bad_credentials_and_non_admins(client, admin_account, candidate_account):
    resp = await client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "nope"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Wrong credentials"

    resp = await client.post("/api/auth/login", json={"email": "someone@example.com", "password": "not-an-admin"})
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied. Admin role required."


@pytest.mark.asyncio
async def test_protected_routes_require_a_valid_admin_token(client, admin_account):
    resp = await client.get("/api/candidates")
    assert resp.status_code in (401, 403)

    resp = await client.get("/api/candidates", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_candidate_endpoints(client, admin_headers):
    resp = await client.post("/api/candidates", headers=admin_headers, json={"email": "jane.doe@example.com", "name": "  Jane  "})
    assert resp.status_code == 201
    candidate = resp.json()
    assert candidate["id"] == "jane_doe_example_com"
    assert candidate["name"] == "Jane"

    resp = await client.post("/api/candidates", headers=admin_headers, json={"email": "jane.doe@example.com", "name": "Jane"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Candidate with this email already exists"

    resp = await client.post("/api/candidates", headers=admin_headers, json={"email": "blank@example.com", "name": "   "})
    assert resp.status_code == 422

    resp = await client.patch(f"/api/candidates/{candidate['id']}", headers=admin_headers, json={"name": "Jane Doe"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Jane Doe"

    resp = await client.get("/api/candidates", headers=admin_headers)
    assert resp.json()["count"] == 1

    resp = await client.delete(f"/api/candidates/{candidate['id']}", headers=admin_headers)
    assert resp.status_code == 204
    resp = await client.get(f"/api/candidates/{candidate['id']}", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_question_and_template_endpoints(client, admin_headers):
    first = await _create_question(client, admin_headers, "Closures")
    second = await _create_question(client, admin_headers, "Promises")

    resp = await client.post("/api/templates", headers=admin_headers, json={"name": "Empty", "questionIds": []})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Select at least one question"

    resp = await client.post(
        "/api/templates", headers=admin_headers, json={"name": "Basics", "questionIds": [second["id"], first["id"]]}
    )
    assert resp.status_code == 201
    template = resp.json()
    assert template["questionCount"] == 2
    assert template["description"] == ""

    resp = await client.patch(f"/api/questions/{first['id']}", headers=admin_headers, json={"content": "Updated"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "Closures"
    assert resp.json()["content"] == "Updated"

    resp = await client.delete(f"/api/questions/{second['id']}", headers=admin_headers)
    assert resp.status_code == 204

    resp = await client.get(f"/api/templates/{template['id']}", headers=admin_headers)
    assert resp.json()["questionIds"] == [first["id"]]
    assert resp.json()["questionCount"] == 1

    resp = await client.delete(f"/api/templates/{template['id']}", headers=admin_headers)
    assert resp.status_code == 204
    resp = await client.get(f"/api/templates/{template['id']}", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_session_lifecycle_endpoints(client, admin_headers, db_session):
    candidate, questions, template = await _create_session_fixture(client, admin_headers)

    resp = await client.post(
        "/api/sessions", headers=admin_headers, json={"candidateId": candidate["id"], "templateId": template["id"]}
    )
    assert resp.status_code == 201, resp.text
    session = resp.json()
    assert session["status"] == "active"
    assert session["candidateName"] == "Jane"
    assert session["templateName"] == "JavaScript Basics"
    assert session["link"] == f"https://portal.example.com/session/{session['id']}"
    assert [q["title"] for q in session["questions"]] == ["Promises", "Closures"]
    assert [q["order"] for q in session["questions"]] == [0, 1]

    started = datetime.datetime.fromisoformat(session["startedAt"].replace("Z", "+00:00"))
    expires = datetime.datetime.fromisoformat(session["expiresAt"].replace("Z", "+00:00"))
    assert expires - started == datetime.timedelta(hours=2)

    resp = await client.post(f"/api/sessions/{session['id']}/terminate", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "terminated"
    assert resp.json()["link"] is None

    resp = await client.post(f"/api/sessions/{session['id']}/complete", headers=admin_headers)
    assert resp.status_code == 409

    resp = await client.delete(f"/api/sessions/{session['id']}", headers=admin_headers)
    assert resp.status_code == 204
    resp = await client.get(f"/api/sessions/{session['id']}", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_overdue_sessions_are_listed_as_expired(client, admin_headers, db_session):
    candidate, _, template = await _create_session_fixture(client, admin_headers)
    session = (
        await client.post(
            "/api/sessions", headers=admin_headers, json={"candidateId": candidate["id"], "templateId": template["id"]}
        )
    ).json()

    await db_session.execute(
        sqlalchemy.update(EvaluationSession)
        .where(EvaluationSession.id == session["id"])
        .values(expires_at=utc_now() - datetime.timedelta(minutes=1))
    )
    await db_session.commit()

    resp = await client.get("/api/dashboard", headers=admin_headers)
    assert resp.json()["activeSessions"] == 0

    resp = await client.get("/api/sessions", headers=admin_headers)
    assert resp.status_code == 200
    listed = resp.json()["items"]
    assert listed[0]["id"] == session["id"]
    assert listed[0]["status"] == "expired"
    assert listed[0]["link"] is None

    resp = await client.post(f"/api/sessions/{session['id']}/terminate", headers=admin_headers)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_session_creation_errors(client, admin_headers):
    candidate, questions, template = await _create_session_fixture(client, admin_headers)

    resp = await client.post("/api/sessions", headers=admin_headers, json={"candidateId": "nobody", "templateId": template["id"]})
    assert resp.status_code == 404

    resp = await client.post("/api/sessions", headers=admin_headers, json={"candidateId": candidate["id"], "templateId": 9999})
    assert resp.status_code == 404

    for question in questions:
        await client.delete(f"/api/questions/{question['id']}", headers=admin_headers)

    resp = await client.post(
        "/api/sessions", headers=admin_headers, json={"candidateId": candidate["id"], "templateId": template["id"]}
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_dashboard_counts(client, admin_headers):
    candidate, _, template = await _create_session_fixture(client, admin_headers)
    await client.post("/api/sessions", headers=admin_headers, json={"candidateId": candidate["id"], "templateId": template["id"]})

    resp = await client.get("/api/dashboard", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"candidates": 1, "questions": 2, "templates": 1, "activeSessions": 1}

    resp = await client.delete(f"/api/candidates/{candidate['id']}", headers=admin_headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_candidate_emails_stay_unique_across_updates(client, admin_headers):
    first = (await client.post("/api/candidates", headers=admin_headers, json={"email": "a@example.com", "name": "A"})).json()

    resp = await client.patch(f"/api/candidates/{first['id']}", headers=admin_headers, json={"email": "b@example.com"})
    assert resp.status_code == 200

    resp = await client.post("/api/candidates", headers=admin_headers, json={"email": "b@example.com", "name": "B"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Candidate with this email already exists"

    resp = await client.post("/api/candidates", headers=admin_headers, json={"email": "c@example.com", "name": "C"})
    assert resp.status_code == 201

    resp = await client.patch(f"/api/candidates/{first['id']}", headers=admin_headers, json={"email": "c@example.com"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Candidate with this email already exists"

    # Re-sending the candidate's own email is not a conflict
    resp = await client.patch(f"/api/candidates/{first['id']}", headers=admin_headers, json={"email": "b@example.com"})
    assert resp.status_code == 200

    resp = await client.get("/api/candidates", headers=admin_headers)
    emails = sorted(item["email"] for item in resp.json()["items"])
    assert emails == ["b@example.com", "c@example.com"]


@pytest.mark.asyncio
async def test_valid_token_of_non_admin_is_forbidden(client, candidate_account):
    token = jwt_generator.generate_access_token(account=candidate_account)
    resp = await client.get("/api/candidates", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied. Admin role required."

    # An admin role claim does not override the stored role
    forged = jwt_generator._generate_jwt_token(
        jwt_data={"email": candidate_account.email, "role": "admin"},
        expires_delta=datetime.timedelta(minutes=5),
    )
    resp = await client.get("/api/candidates", headers={"Authorization": f"Bearer {forged}"})
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_template_update_validates_question_ids(client, admin_headers):
    first = await _create_question(client, admin_headers, "Closures")
    second = await _create_question(client, admin_headers, "Promises")
    template = (
        await client.post("/api/templates", headers=admin_headers, json={"name": "Basics", "questionIds": [first["id"]]})
    ).json()
    url = f"/api/templates/{template['id']}"

    resp = await client.patch(url, headers=admin_headers, json={"questionIds": []})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Select at least one question"

    resp = await client.patch(url, headers=admin_headers, json={"questionIds": [first["id"], first["id"]]})
    assert resp.status_code == 400

    resp = await client.patch(url, headers=admin_headers, json={"questionIds": [first["id"], 9999]})
    assert resp.status_code == 400
    assert "9999" in resp.json()["detail"]

    resp = await client.get(url, headers=admin_headers)
    assert resp.json()["questionIds"] == [first["id"]]

    resp = await client.patch(url, headers=admin_headers, json={"questionIds": [second["id"], first["id"]], "name": "Renamed"})
    assert resp.status_code == 200
    assert resp.json()["questionIds"] == [second["id"], first["id"]]
    assert resp.json()["name"] == "Renamed"


@pytest.mark.asyncio
async def test_get_session_reports_expired_before_any_sweep(client, admin_headers, db_session):
    candidate, _, template = await _create_session_fixture(client, admin_headers)
    session = (
        await client.post(
            "/api/sessions", headers=admin_headers, json={"candidateId": candidate["id"], "templateId": template["id"]}
        )
    ).json()

    await db_session.execute(
        sqlalchemy.update(EvaluationSession)
        .where(EvaluationSession.id == session["id"])
        .values(expires_at=utc_now() - datetime.timedelta(seconds=30))
    )
    await db_session.commit()

    resp = await client.get(f"/api/sessions/{session['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "expired"
    assert resp.json()["link"] is None

    stored = (
        await db_session.execute(sqlalchemy.select(EvaluationSession.status).where(EvaluationSession.id == session["id"]))
    ).scalar_one()
    assert stored == SessionStatusEnum.ACTIVE


@pytest.mark.asyncio
async def test_complete_session_sets_completed_at(client, admin_headers):
    candidate, _, template = await _create_session_fixture(client, admin_headers)
    session = (
        await client.post(
            "/api/sessions", headers=admin_headers, json={"candidateId": candidate["id"], "templateId": template["id"]}
        )
    ).json()
    assert session["completedAt"] is None

    resp = await client.post(f"/api/sessions/{session['id']}/complete", headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "completed"
    assert body["completedAt"] is not None
    assert body["link"] is None

    resp = await client.post(f"/api/sessions/{session['id']}/terminate", headers=admin_headers)
    assert resp.status_code == 409

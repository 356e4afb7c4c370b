import datetime

import pytest
import sqlalchemy

from src.models.db.candidate import Candidate
from src.models.db.evaluation_session import EvaluationSession, SessionStatusEnum
from src.repository.crud.account import AccountCRUDRepository
from src.repository.crud.auth_session import AuthSessionCRUDRepository
from src.repository.crud.candidate import CandidateCRUDRepository, candidate_id_from_email
from src.repository.crud.evaluation_session import EvaluationSessionCRUDRepository
from src.repository.crud.question import QuestionCRUDRepository
from src.repository.crud.template import TemplateCRUDRepository
from src.services.session_lifecycle import utc_now
from src.utilities.exceptions.database import EntityAlreadyExists, EntityDoesNotExist, EntityInUse
from src.utilities.exceptions.evaluation import InvalidTemplate, SessionStateConflict
from src.utilities.exceptions.password import PasswordDoesNotMatch


async def _seed_template(db_session, admin_id: int, titles: tuple[str, ...] = ("First", "Second", "Third")):
    question_repo = QuestionCRUDRepository(async_session=db_session)
    questions = [
        await question_repo.create_question(title=title, content=f"## {title}\n\nBody", admin_id=admin_id)
        for title in titles
    ]
    template_repo = TemplateCRUDRepository(async_session=db_session)
    template = await template_repo.create_template(
        name="Basics",
        description="",
        question_ids=[q.id for q in reversed(questions)],
        admin_id=admin_id,
    )
    return questions, template


def test_candidate_id_replaces_every_non_alphanumeric_character():
    assert candidate_id_from_email("jane.doe@example.com") == "jane_doe_example_com"
    assert candidate_id_from_email("a+b-c@x.io") == "a_b_c_x_io"


@pytest.mark.asyncio
async def test_account_password_verification(db_session, admin_account):
    repo = AccountCRUDRepository(async_session=db_session)

    account = await repo.verify_password(email="ADMIN@example.com", password="correct-horse-battery")
    assert account.id == admin_account.id
    assert account.is_admin

    with pytest.raises(PasswordDoesNotMatch):
        await repo.verify_password(email="admin@example.com", password="wrong")
    with pytest.raises(EntityDoesNotExist):
        await repo.verify_password(email="nobody@example.com", password="whatever")
    with pytest.raises(EntityAlreadyExists):
        await repo.create_account(email="admin@example.com", password="x", display_name="Dup")


@pytest.mark.asyncio
async def test_refresh_sessions_expire(db_session, admin_account):
    repo = AuthSessionCRUDRepository(async_session=db_session)

    live = await repo.create_session(account_id=admin_account.id, expiry_minutes=5)
    assert await repo.get_valid_session_by_token(token=live.token) is not None

    stale = await repo.create_session(account_id=admin_account.id, expiry_minutes=-1)
    assert await repo.get_valid_session_by_token(token=stale.token) is None

    assert await repo.delete_session_by_token(token=live.token) is True
    assert await repo.delete_session_by_token(token=live.token) is False


@pytest.mark.asyncio
async def test_candidate_crud(db_session, admin_account):
    repo = CandidateCRUDRepository(async_session=db_session)

    candidate = await repo.create_candidate(email="jane.doe@example.com", name="Jane", admin_id=admin_account.id)
    assert candidate.id == "jane_doe_example_com"

    with pytest.raises(EntityAlreadyExists):
        await repo.create_candidate(email="jane.doe@example.com", name="Jane Again", admin_id=admin_account.id)

    updated = await repo.update_candidate(candidate_id=candidate.id, name="Jane Doe")
    assert updated.name == "Jane Doe"
    assert updated.email == "jane.doe@example.com"

    moved = await repo.update_candidate(candidate_id=candidate.id, email="jane@example.org")
    assert moved.id == "jane_doe_example_com"
    assert moved.email == "jane@example.org"

    assert await repo.count() == 1
    await repo.delete_candidate(candidate_id=candidate.id)
    assert await repo.count() == 0
    with pytest.raises(EntityDoesNotExist):
        await repo.get_by_id(candidate_id=candidate.id)


@pytest.mark.asyncio
async def test_template_validation(db_session, admin_account):
    questions, _ = await _seed_template(db_session, admin_account.id)
    repo = TemplateCRUDRepository(async_session=db_session)

    with pytest.raises(InvalidTemplate, match="Select at least one question"):
        await repo.create_template(name="Empty", description="", question_ids=[], admin_id=admin_account.id)

    with pytest.raises(InvalidTemplate):
        await repo.create_template(
            name="Dup", description="", question_ids=[questions[0].id, questions[0].id], admin_id=admin_account.id
        )

    with pytest.raises(InvalidTemplate) as exc_info:
        await repo.create_template(
            name="Missing", description="", question_ids=[questions[0].id, 9999], admin_id=admin_account.id
        )
    assert exc_info.value.missing_question_ids == [9999]


@pytest.mark.asyncio
async def test_deleting_question_strips_it_from_templates(db_session, admin_account):
    questions, template = await _seed_template(db_session, admin_account.id)
    first, second, third = questions

    await QuestionCRUDRepository(async_session=db_session).delete_question(question_id=second.id)

    template_repo = TemplateCRUDRepository(async_session=db_session)
    reloaded = await template_repo.get_by_id(template_id=template.id)
    assert reloaded.question_ids == [third.id, first.id]


@pytest.mark.asyncio
async def test_session_snapshot_survives_question_and_template_edits(db_session, session_factory, admin_account):
    questions, template = await _seed_template(db_session, admin_account.id)
    candidate = await CandidateCRUDRepository(async_session=db_session).create_candidate(
        email="sam@example.com", name="Sam", admin_id=admin_account.id
    )
    ordered = list(reversed(questions))
    original_titles = [q.title for q in ordered]

    session_repo = EvaluationSessionCRUDRepository(async_session=db_session)
    session = await session_repo.create_session(
        candidate=candidate, template=template, questions=ordered, admin_id=admin_account.id
    )
    assert len(session.id) == 20
    assert session.status == SessionStatusEnum.ACTIVE
    assert [q["order"] for q in session.questions] == [0, 1, 2]
    assert [q["id"] for q in session.questions] == [q.id for q in ordered]

    question_repo = QuestionCRUDRepository(async_session=db_session)
    await question_repo.update_question(question_id=ordered[0].id, title="Rewritten")
    await question_repo.delete_question(question_id=ordered[1].id)
    await TemplateCRUDRepository(async_session=db_session).delete_template(template_id=template.id)

    async with session_factory() as fresh:
        stored = await EvaluationSessionCRUDRepository(async_session=fresh).get_by_id(session_id=session.id)
        assert [q["title"] for q in stored.questions] == original_titles
        assert [q["id"] for q in stored.questions] == [q.id for q in ordered]

    with pytest.raises(EntityInUse):
        await CandidateCRUDRepository(async_session=db_session).delete_candidate(candidate_id=candidate.id)


@pytest.mark.asyncio
async def test_expire_overdue_and_transitions(db_session, admin_account):
    questions, template = await _seed_template(db_session, admin_account.id)
    candidate = await CandidateCRUDRepository(async_session=db_session).create_candidate(
        email="lee@example.com", name="Lee", admin_id=admin_account.id
    )
    repo = EvaluationSessionCRUDRepository(async_session=db_session)
    overdue = await repo.create_session(candidate=candidate, template=template, questions=questions, admin_id=admin_account.id)
    running = await repo.create_session(candidate=candidate, template=template, questions=questions, admin_id=admin_account.id)

    await db_session.execute(
        sqlalchemy.update(EvaluationSession)
        .where(EvaluationSession.id == overdue.id)
        .values(expires_at=utc_now() - datetime.timedelta(minutes=1))
    )
    await db_session.commit()

    assert await repo.count_active() == 1
    assert await repo.expire_overdue() == 1
    assert await repo.expire_overdue() == 0
    assert (await repo.get_by_id(session_id=overdue.id)).status == SessionStatusEnum.EXPIRED

    with pytest.raises(SessionStateConflict):
        await repo.terminate_session(session_id=overdue.id)

    completed = await repo.complete_session(session_id=running.id)
    assert completed.status == SessionStatusEnum.COMPLETED
    assert completed.completed_at is not None
    with pytest.raises(SessionStateConflict):
        await repo.terminate_session(session_id=running.id)

    rows = await repo.list_sessions()
    assert {row[0].id for row in rows} == {overdue.id, running.id}
    assert {row[1] for row in rows} == {"Lee"}
    assert {row[2] for row in rows} == {"Basics"}

    await repo.delete_session(session_id=overdue.id)
    with pytest.raises(EntityDoesNotExist):
        await repo.get_by_id(session_id=overdue.id)


@pytest.mark.asyncio
async def test_candidate_unique_violation_maps_to_already_exists(db_session, admin_account, monkeypatch):
    db_session.add(Candidate(id="legacy_id", email="dup@example.com", name="Legacy", admin_id=admin_account.id))
    await db_session.commit()

    async def never_taken(self, *, email, exclude_id=None):
        return False

    monkeypatch.setattr(CandidateCRUDRepository, "_email_taken", never_taken)
    repo = CandidateCRUDRepository(async_session=db_session)

    with pytest.raises(EntityAlreadyExists):
        await repo.create_candidate(email="dup@example.com", name="Dup", admin_id=admin_account.id)

    # The session is usable again after the rollback
    assert await repo.count() == 1


@pytest.mark.asyncio
async def test_transition_loses_to_a_concurrent_writer(db_session, session_factory, admin_account):
    questions, template = await _seed_template(db_session, admin_account.id)
    candidate = await CandidateCRUDRepository(async_session=db_session).create_candidate(
        email="kim@example.com", name="Kim", admin_id=admin_account.id
    )
    repo = EvaluationSessionCRUDRepository(async_session=db_session)
    session = await repo.create_session(candidate=candidate, template=template, questions=questions, admin_id=admin_account.id)

    # `db_session` still holds the row as active while another connection terminates it
    async with session_factory() as other:
        await EvaluationSessionCRUDRepository(async_session=other).terminate_session(session_id=session.id)

    with pytest.raises(SessionStateConflict) as exc_info:
        await repo.complete_session(session_id=session.id)
    assert exc_info.value.status == "terminated"

    stored = await repo.get_by_id(session_id=session.id)
    assert stored.status == SessionStatusEnum.TERMINATED
    assert stored.completed_at is None

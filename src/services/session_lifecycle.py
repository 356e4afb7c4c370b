"""
Evaluation session lifecycle.

A session starts ``active`` with a fixed time box and leaves that state exactly
once, to ``completed``, ``terminated`` or ``expired``. Expiry is derived from the
clock: an ``active`` session whose ``expires_at`` has passed is reported as
``expired`` everywhere, and the repository persists that status on its sweeps.

The question list is copied out of the question bank when the session is
created, so later edits to questions or templates never reach a running or
finished session.
"""

import datetime
import secrets
import string
import typing

from src.config.manager import settings
from src.models.db.evaluation_session import SessionStatusEnum
from src.utilities.exceptions.evaluation import SessionHasNoQuestions, SessionStateConflict

SESSION_DURATION: datetime.timedelta = datetime.timedelta(minutes=settings.SESSION_DURATION_MINUTES)

SESSION_ID_LENGTH: int = 20
_SESSION_ID_ALPHABET: str = string.ascii_letters + string.digits


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def as_utc(value: datetime.datetime) -> datetime.datetime:
    """Treat naive timestamps (SQLite drops the offset) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


def generate_session_id() -> str:
    return "".join(secrets.choice(_SESSION_ID_ALPHABET) for _ in range(SESSION_ID_LENGTH))


def compute_expiry(started_at: datetime.datetime) -> datetime.datetime:
    return started_at + SESSION_DURATION


def build_question_snapshot(questions: typing.Iterable[typing.Any]) -> list[dict[str, typing.Any]]:
    """Deep-copy questions into the plain dicts stored on the session.

    ``order`` is the position in the resulting list, so gaps left by deleted
    questions are closed up.
    """
    snapshot = [
        {"id": int(question.id), "title": str(question.title), "content": str(question.content), "order": index}
        for index, question in enumerate(questions)
    ]
    if not snapshot:
        raise SessionHasNoQuestions("Template has no available questions")
    return snapshot


def is_past_expiry(expires_at: datetime.datetime, now: datetime.datetime | None = None) -> bool:
    now = now or utc_now()
    return as_utc(now) > as_utc(expires_at)


def effective_status(session: typing.Any, now: datetime.datetime | None = None) -> SessionStatusEnum:
    status = SessionStatusEnum(session.status)
    if status == SessionStatusEnum.ACTIVE and is_past_expiry(session.expires_at, now):
        return SessionStatusEnum.EXPIRED
    return status


def ensure_active(session: typing.Any, now: datetime.datetime | None = None) -> None:
    status = effective_status(session, now)
    if status != SessionStatusEnum.ACTIVE:
        raise SessionStateConflict(f"Session {session.id} is {status.value}", status=status.value)


def session_link(session_id: str) -> str:
    return f"{settings.PORTAL_BASE_URL.rstrip('/')}/session/{session_id}"

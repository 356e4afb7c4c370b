import datetime
import logging

import fastapi

from src.api.dependencies.auth import get_current_admin
from src.api.dependencies.repository import get_repository
from src.models.db.account import Account
from src.models.db.evaluation_session import EvaluationSession, SessionStatusEnum
from src.models.schemas.evaluation_session import SessionCreate, SessionOut, SessionQuestionOut, SessionsListResponse
from src.repository.crud.candidate import CandidateCRUDRepository
from src.repository.crud.evaluation_session import EvaluationSessionCRUDRepository
from src.repository.crud.question import QuestionCRUDRepository
from src.repository.crud.template import TemplateCRUDRepository
from src.services.session_lifecycle import effective_status, session_link, utc_now
from src.utilities.exceptions.database import EntityDoesNotExist
from src.utilities.exceptions.evaluation import SessionHasNoQuestions, SessionStateConflict
from src.utilities.exceptions.http.exc_400 import http_400_exc_bad_request
from src.utilities.exceptions.http.exc_404 import http_404_exc_id_not_found_request
from src.utilities.exceptions.http.exc_409 import http_409_exc_session_state_conflict

logger = logging.getLogger(__name__)


router = fastapi.APIRouter(prefix="/sessions", tags=["sessions"])


def _session_out(
    session: EvaluationSession,
    candidate_name: str | None = None,
    template_name: str | None = None,
    now: datetime.datetime | None = None,
) -> SessionOut:
    status = effective_status(session, now)
    return SessionOut(
        id=session.id,
        admin_id=session.admin_id,
        candidate_id=session.candidate_id,
        candidate_name=candidate_name,
        template_id=session.template_id,
        template_name=template_name,
        questions=[SessionQuestionOut(**question) for question in session.questions],
        status=status.value,
        started_at=session.started_at,
        expires_at=session.expires_at,
        completed_at=session.completed_at,
        link=session_link(session.id) if status == SessionStatusEnum.ACTIVE else None,
        created_at=session.created_at,
        updated_at=session.updated_at,
    )


@router.post(
    path="",
    name="sessions:create",
    response_model=SessionOut,
    status_code=fastapi.status.HTTP_201_CREATED,
    summary="Start an evaluation session",
    description=(
        "Starts a time-boxed session for a candidate. The template's questions are copied into the session in "
        "template order; questions deleted since the template was saved are skipped. The session expires two hours "
        "after it starts."
    ),
)
async def create_session(
    payload: SessionCreate,
    current_admin: Account = fastapi.Depends(get_current_admin),
    candidate_repo: CandidateCRUDRepository = fastapi.Depends(get_repository(repo_type=CandidateCRUDRepository)),
    template_repo: TemplateCRUDRepository = fastapi.Depends(get_repository(repo_type=TemplateCRUDRepository)),
    question_repo: QuestionCRUDRepository = fastapi.Depends(get_repository(repo_type=QuestionCRUDRepository)),
    session_repo: EvaluationSessionCRUDRepository = fastapi.Depends(get_repository(repo_type=EvaluationSessionCRUDRepository)),
) -> SessionOut:
    try:
        candidate = await candidate_repo.get_by_id(candidate_id=payload.candidate_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Candidate", id=payload.candidate_id)
    try:
        template = await template_repo.get_by_id(template_id=payload.template_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Template", id=payload.template_id)

    question_ids = list(template.question_ids or [])
    by_id = await question_repo.get_many_by_ids(question_ids=question_ids)
    questions = [by_id[qid] for qid in question_ids if qid in by_id]
    if len(questions) < len(question_ids):
        logger.warning(
            f"Template {template.id} lists {len(question_ids) - len(questions)} missing question(s), skipping them"
        )

    try:
        session = await session_repo.create_session(
            candidate=candidate,
            template=template,
            questions=questions,
            admin_id=current_admin.id,
        )
    except SessionHasNoQuestions as e:
        raise await http_400_exc_bad_request(detail=str(e))

    return _session_out(session, candidate_name=candidate.name, template_name=template.name)


@router.get(
    path="",
    name="sessions:list",
    response_model=SessionsListResponse,
    status_code=fastapi.status.HTTP_200_OK,
    description="Overdue active sessions are marked expired before the list is read.",
)
async def list_sessions(
    current_admin: Account = fastapi.Depends(get_current_admin),
    session_repo: EvaluationSessionCRUDRepository = fastapi.Depends(get_repository(repo_type=EvaluationSessionCRUDRepository)),
) -> SessionsListResponse:
    now = utc_now()
    await session_repo.expire_overdue(now=now)
    rows = await session_repo.list_sessions()
    items = [_session_out(session, candidate_name, template_name, now) for session, candidate_name, template_name in rows]
    return SessionsListResponse(items=items, count=len(items))


@router.get(
    path="/{session_id}",
    name="sessions:get",
    response_model=SessionOut,
    status_code=fastapi.status.HTTP_200_OK,
)
async def get_session(
    session_id: str,
    current_admin: Account = fastapi.Depends(get_current_admin),
    session_repo: EvaluationSessionCRUDRepository = fastapi.Depends(get_repository(repo_type=EvaluationSessionCRUDRepository)),
) -> SessionOut:
    try:
        session, candidate_name, template_name = await session_repo.get_with_names(session_id=session_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Session", id=session_id)
    return _session_out(session, candidate_name, template_name)


@router.post(
    path="/{session_id}/terminate",
    name="sessions:terminate",
    response_model=SessionOut,
    status_code=fastapi.status.HTTP_200_OK,
    description="Ends an active session early. Sessions that already expired, completed or were terminated answer 409.",
)
async def terminate_session(
    session_id: str,
    current_admin: Account = fastapi.Depends(get_current_admin),
    session_repo: EvaluationSessionCRUDRepository = fastapi.Depends(get_repository(repo_type=EvaluationSessionCRUDRepository)),
) -> SessionOut:
    try:
        await session_repo.terminate_session(session_id=session_id)
        session, candidate_name, template_name = await session_repo.get_with_names(session_id=session_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Session", id=session_id)
    except SessionStateConflict as e:
        raise await http_409_exc_session_state_conflict(session_id=session_id, status=e.status)
    return _session_out(session, candidate_name, template_name)


@router.post(
    path="/{session_id}/complete",
    name="sessions:complete",
    response_model=SessionOut,
    status_code=fastapi.status.HTTP_200_OK,
)
async def complete_session(
    session_id: str,
    current_admin: Account = fastapi.Depends(get_current_admin),
    session_repo: EvaluationSessionCRUDRepository = fastapi.Depends(get_repository(repo_type=EvaluationSessionCRUDRepository)),
) -> SessionOut:
    try:
        await session_repo.complete_session(session_id=session_id)
        session, candidate_name, template_name = await session_repo.get_with_names(session_id=session_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Session", id=session_id)
    except SessionStateConflict as e:
        raise await http_409_exc_session_state_conflict(session_id=session_id, status=e.status)
    return _session_out(session, candidate_name, template_name)


@router.delete(
    path="/{session_id}",
    name="sessions:delete",
    status_code=fastapi.status.HTTP_204_NO_CONTENT,
)
async def delete_session(
    session_id: str,
    current_admin: Account = fastapi.Depends(get_current_admin),
    session_repo: EvaluationSessionCRUDRepository = fastapi.Depends(get_repository(repo_type=EvaluationSessionCRUDRepository)),
) -> None:
    try:
        await session_repo.delete_session(session_id=session_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Session", id=session_id)

import fastapi

from src.api.dependencies.auth import get_current_admin
from src.api.dependencies.repository import get_repository
from src.models.db.account import Account
from src.models.schemas.question import QuestionCreate, QuestionOut, QuestionsListResponse, QuestionUpdate
from src.repository.crud.question import QuestionCRUDRepository
from src.utilities.exceptions.database import EntityDoesNotExist
from src.utilities.exceptions.http.exc_404 import http_404_exc_id_not_found_request


router = fastapi.APIRouter(prefix="/questions", tags=["questions"])


@router.post(
    path="",
    name="questions:create",
    response_model=QuestionOut,
    status_code=fastapi.status.HTTP_201_CREATED,
)
async def create_question(
    payload: QuestionCreate,
    current_admin: Account = fastapi.Depends(get_current_admin),
    question_repo: QuestionCRUDRepository = fastapi.Depends(get_repository(repo_type=QuestionCRUDRepository)),
) -> QuestionOut:
    question = await question_repo.create_question(title=payload.title, content=payload.content, admin_id=current_admin.id)
    return QuestionOut.model_validate(question)


@router.get(
    path="",
    name="questions:list",
    response_model=QuestionsListResponse,
    status_code=fastapi.status.HTTP_200_OK,
)
async def list_questions(
    current_admin: Account = fastapi.Depends(get_current_admin),
    question_repo: QuestionCRUDRepository = fastapi.Depends(get_repository(repo_type=QuestionCRUDRepository)),
) -> QuestionsListResponse:
    questions = await question_repo.list_questions()
    items = [QuestionOut.model_validate(question) for question in questions]
    return QuestionsListResponse(items=items, count=len(items))


@router.get(
    path="/{question_id}",
    name="questions:get",
    response_model=QuestionOut,
    status_code=fastapi.status.HTTP_200_OK,
)
async def get_question(
    question_id: int,
    current_admin: Account = fastapi.Depends(get_current_admin),
    question_repo: QuestionCRUDRepository = fastapi.Depends(get_repository(repo_type=QuestionCRUDRepository)),
) -> QuestionOut:
    try:
        question = await question_repo.get_by_id(question_id=question_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Question", id=question_id)
    return QuestionOut.model_validate(question)


@router.patch(
    path="/{question_id}",
    name="questions:update",
    response_model=QuestionOut,
    status_code=fastapi.status.HTTP_200_OK,
    description="Running and finished sessions keep the text they were started with.",
)
async def update_question(
    question_id: int,
    payload: QuestionUpdate,
    current_admin: Account = fastapi.Depends(get_current_admin),
    question_repo: QuestionCRUDRepository = fastapi.Depends(get_repository(repo_type=QuestionCRUDRepository)),
) -> QuestionOut:
    try:
        question = await question_repo.update_question(question_id=question_id, title=payload.title, content=payload.content)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Question", id=question_id)
    return QuestionOut.model_validate(question)


@router.delete(
    path="/{question_id}",
    name="questions:delete",
    status_code=fastapi.status.HTTP_204_NO_CONTENT,
    description="Also removes the question from every template that lists it.",
)
async def delete_question(
    question_id: int,
    current_admin: Account = fastapi.Depends(get_current_admin),
    question_repo: QuestionCRUDRepository = fastapi.Depends(get_repository(repo_type=QuestionCRUDRepository)),
) -> None:
    try:
        await question_repo.delete_question(question_id=question_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Question", id=question_id)

import fastapi

from src.api.dependencies.auth import get_current_admin
from src.api.dependencies.repository import get_repository
from src.models.db.account import Account
from src.models.schemas.candidate import CandidateCreate, CandidateOut, CandidatesListResponse, CandidateUpdate
from src.repository.crud.candidate import CandidateCRUDRepository
from src.utilities.exceptions.database import EntityAlreadyExists, EntityDoesNotExist, EntityInUse
from src.utilities.exceptions.http.exc_400 import http_400_exc_bad_request
from src.utilities.exceptions.http.exc_404 import http_404_exc_id_not_found_request


router = fastapi.APIRouter(prefix="/candidates", tags=["candidates"])


@router.post(
    path="",
    name="candidates:create",
    response_model=CandidateOut,
    status_code=fastapi.status.HTTP_201_CREATED,
    summary="Register a candidate",
    description="The candidate id is derived from the email address by replacing every non-alphanumeric character with '_'.",
)
async def create_candidate(
    payload: CandidateCreate,
    current_admin: Account = fastapi.Depends(get_current_admin),
    candidate_repo: CandidateCRUDRepository = fastapi.Depends(get_repository(repo_type=CandidateCRUDRepository)),
) -> CandidateOut:
    try:
        candidate = await candidate_repo.create_candidate(email=payload.email, name=payload.name, admin_id=current_admin.id)
    except EntityAlreadyExists:
        raise await http_400_exc_bad_request(detail="Candidate with this email already exists")
    return CandidateOut.model_validate(candidate)


@router.get(
    path="",
    name="candidates:list",
    response_model=CandidatesListResponse,
    status_code=fastapi.status.HTTP_200_OK,
)
async def list_candidates(
    current_admin: Account = fastapi.Depends(get_current_admin),
    candidate_repo: CandidateCRUDRepository = fastapi.Depends(get_repository(repo_type=CandidateCRUDRepository)),
) -> CandidatesListResponse:
    candidates = await candidate_repo.list_candidates()
    items = [CandidateOut.model_validate(candidate) for candidate in candidates]
    return CandidatesListResponse(items=items, count=len(items))


@router.get(
    path="/{candidate_id}",
    name="candidates:get",
    response_model=CandidateOut,
    status_code=fastapi.status.HTTP_200_OK,
)
async def get_candidate(
    candidate_id: str,
    current_admin: Account = fastapi.Depends(get_current_admin),
    candidate_repo: CandidateCRUDRepository = fastapi.Depends(get_repository(repo_type=CandidateCRUDRepository)),
) -> CandidateOut:
    try:
        candidate = await candidate_repo.get_by_id(candidate_id=candidate_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Candidate", id=candidate_id)
    return CandidateOut.model_validate(candidate)


@router.patch(
    path="/{candidate_id}",
    name="candidates:update",
    response_model=CandidateOut,
    status_code=fastapi.status.HTTP_200_OK,
    description="Only the provided fields are updated. The candidate id never changes.",
)
async def update_candidate(
    candidate_id: str,
    payload: CandidateUpdate,
    current_admin: Account = fastapi.Depends(get_current_admin),
    candidate_repo: CandidateCRUDRepository = fastapi.Depends(get_repository(repo_type=CandidateCRUDRepository)),
) -> CandidateOut:
    try:
        candidate = await candidate_repo.update_candidate(candidate_id=candidate_id, email=payload.email, name=payload.name)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Candidate", id=candidate_id)
    except EntityAlreadyExists:
        raise await http_400_exc_bad_request(detail="Candidate with this email already exists")
    return CandidateOut.model_validate(candidate)


@router.delete(
    path="/{candidate_id}",
    name="candidates:delete",
    status_code=fastapi.status.HTTP_204_NO_CONTENT,
)
async def delete_candidate(
    candidate_id: str,
    current_admin: Account = fastapi.Depends(get_current_admin),
    candidate_repo: CandidateCRUDRepository = fastapi.Depends(get_repository(repo_type=CandidateCRUDRepository)),
) -> None:
    try:
        await candidate_repo.delete_candidate(candidate_id=candidate_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Candidate", id=candidate_id)
    except EntityInUse as e:
        raise await http_400_exc_bad_request(detail=str(e))

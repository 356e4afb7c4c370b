import fastapi

from src.api.dependencies.auth import get_current_admin
from src.api.dependencies.repository import get_repository
from src.models.db.account import Account
from src.models.schemas.dashboard import DashboardStats
from src.repository.crud.candidate import CandidateCRUDRepository
from src.repository.crud.evaluation_session import EvaluationSessionCRUDRepository
from src.repository.crud.question import QuestionCRUDRepository
from src.repository.crud.template import TemplateCRUDRepository


router = fastapi.APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    path="",
    name="dashboard:stats",
    response_model=DashboardStats,
    status_code=fastapi.status.HTTP_200_OK,
    summary="Collection counts for the admin dashboard",
)
async def get_dashboard_stats(
    current_admin: Account = fastapi.Depends(get_current_admin),
    candidate_repo: CandidateCRUDRepository = fastapi.Depends(get_repository(repo_type=CandidateCRUDRepository)),
    question_repo: QuestionCRUDRepository = fastapi.Depends(get_repository(repo_type=QuestionCRUDRepository)),
    template_repo: TemplateCRUDRepository = fastapi.Depends(get_repository(repo_type=TemplateCRUDRepository)),
    session_repo: EvaluationSessionCRUDRepository = fastapi.Depends(get_repository(repo_type=EvaluationSessionCRUDRepository)),
) -> DashboardStats:
    return DashboardStats(
        candidates=await candidate_repo.count(),
        questions=await question_repo.count(),
        templates=await template_repo.count(),
        active_sessions=await session_repo.count_active(),
    )

import fastapi

from src.api.routes.auth import router as auth_router
from src.api.routes.candidates import router as candidates_router
from src.api.routes.dashboard import router as dashboard_router
from src.api.routes.questions import router as questions_router
from src.api.routes.sessions import router as sessions_router
from src.api.routes.templates import router as templates_router

router = fastapi.APIRouter()

# Health check endpoint for ECS/Load Balancer
@router.get("/health", status_code=200)
async def health_check():
    return {"status": "healthy", "service": "interview-portal-admin"}

router.include_router(router=auth_router)
router.include_router(router=candidates_router)
router.include_router(router=questions_router)
router.include_router(router=templates_router)
router.include_router(router=sessions_router)
router.include_router(router=dashboard_router)

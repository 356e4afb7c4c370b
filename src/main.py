import fastapi
import uvicorn
from dotenv import load_dotenv
from fastapi.middleware.cors import CORSMiddleware

from src.api.endpoints import router as api_endpoint_router
from src.config.events import backend_lifespan
from src.config.manager import settings


def initialize_backend_application() -> fastapi.FastAPI:
    # Load environment variables from .env if present
    load_dotenv()
    app = fastapi.FastAPI(**settings.set_backend_app_attributes, lifespan=backend_lifespan)  # type: ignore

    # Tags metadata for Swagger grouping
    tags_metadata = [
        {"name": "auth", "description": "Admin sign-in, token refresh and sign-out."},
        {"name": "candidates", "description": "Candidates that can be invited to evaluation sessions."},
        {"name": "questions", "description": "Question bank with markdown content."},
        {"name": "templates", "description": "Reusable, ordered sets of questions."},
        {
            "name": "sessions",
            "description": "Time-boxed evaluation sessions holding a snapshot of a template's questions.",
        },
        {"name": "dashboard", "description": "Collection counts for the admin overview."},
    ]
    app.openapi_tags = tags_metadata  # type: ignore[attr-defined]

    if not settings.DESCRIPTION:
        app.description = "Administrative API for the interview-evaluation portal."

    # CORS middleware should be added first to handle preflight requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=settings.IS_ALLOWED_CREDENTIALS,
        allow_methods=settings.ALLOWED_METHODS,
        allow_headers=settings.ALLOWED_HEADERS,
    )

    app.include_router(router=api_endpoint_router, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        return {
            "message": "Interview Portal Admin API",
            "version": settings.VERSION,
            "docs": "/docs",
            "health": "/api/health",
        }

    return app


backend_app: fastapi.FastAPI = initialize_backend_application()

if __name__ == "__main__":
    uvicorn.run(
        app="src.main:backend_app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
        workers=settings.SERVER_WORKERS,
        log_level=settings.LOGGING_LEVEL,
    )

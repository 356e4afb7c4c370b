import fastapi

from src.api.dependencies.auth import get_current_admin
from src.api.dependencies.repository import get_repository
from src.models.db.account import Account
from src.models.db.template import Template
from src.models.schemas.template import TemplateCreate, TemplateOut, TemplatesListResponse, TemplateUpdate
from src.repository.crud.template import TemplateCRUDRepository
from src.utilities.exceptions.database import EntityDoesNotExist
from src.utilities.exceptions.evaluation import InvalidTemplate
from src.utilities.exceptions.http.exc_400 import http_400_exc_bad_request
from src.utilities.exceptions.http.exc_404 import http_404_exc_id_not_found_request


router = fastapi.APIRouter(prefix="/templates", tags=["templates"])


def _template_out(template: Template) -> TemplateOut:
    question_ids = list(template.question_ids or [])
    return TemplateOut(
        id=template.id,
        name=template.name,
        description=template.description,
        question_ids=question_ids,
        question_count=len(question_ids),
        admin_id=template.admin_id,
        created_at=template.created_at,
        updated_at=template.updated_at,
    )


@router.post(
    path="",
    name="templates:create",
    response_model=TemplateOut,
    status_code=fastapi.status.HTTP_201_CREATED,
    summary="Create a template from an ordered list of questions",
)
async def create_template(
    payload: TemplateCreate,
    current_admin: Account = fastapi.Depends(get_current_admin),
    template_repo: TemplateCRUDRepository = fastapi.Depends(get_repository(repo_type=TemplateCRUDRepository)),
) -> TemplateOut:
    try:
        template = await template_repo.create_template(
            name=payload.name,
            description=payload.description,
            question_ids=payload.question_ids,
            admin_id=current_admin.id,
        )
    except InvalidTemplate as e:
        raise await http_400_exc_bad_request(detail=str(e))
    return _template_out(template)


@router.get(
    path="",
    name="templates:list",
    response_model=TemplatesListResponse,
    status_code=fastapi.status.HTTP_200_OK,
)
async def list_templates(
    current_admin: Account = fastapi.Depends(get_current_admin),
    template_repo: TemplateCRUDRepository = fastapi.Depends(get_repository(repo_type=TemplateCRUDRepository)),
) -> TemplatesListResponse:
    templates = await template_repo.list_templates()
    items = [_template_out(template) for template in templates]
    return TemplatesListResponse(items=items, count=len(items))


@router.get(
    path="/{template_id}",
    name="templates:get",
    response_model=TemplateOut,
    status_code=fastapi.status.HTTP_200_OK,
)
async def get_template(
    template_id: int,
    current_admin: Account = fastapi.Depends(get_current_admin),
    template_repo: TemplateCRUDRepository = fastapi.Depends(get_repository(repo_type=TemplateCRUDRepository)),
) -> TemplateOut:
    try:
        template = await template_repo.get_by_id(template_id=template_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Template", id=template_id)
    return _template_out(template)


@router.patch(
    path="/{template_id}",
    name="templates:update",
    response_model=TemplateOut,
    status_code=fastapi.status.HTTP_200_OK,
)
async def update_template(
    template_id: int,
    payload: TemplateUpdate,
    current_admin: Account = fastapi.Depends(get_current_admin),
    template_repo: TemplateCRUDRepository = fastapi.Depends(get_repository(repo_type=TemplateCRUDRepository)),
) -> TemplateOut:
    try:
        template = await template_repo.update_template(
            template_id=template_id,
            name=payload.name,
            description=payload.description,
            question_ids=payload.question_ids,
        )
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Template", id=template_id)
    except InvalidTemplate as e:
        raise await http_400_exc_bad_request(detail=str(e))
    return _template_out(template)


@router.delete(
    path="/{template_id}",
    name="templates:delete",
    status_code=fastapi.status.HTTP_204_NO_CONTENT,
)
async def delete_template(
    template_id: int,
    current_admin: Account = fastapi.Depends(get_current_admin),
    template_repo: TemplateCRUDRepository = fastapi.Depends(get_repository(repo_type=TemplateCRUDRepository)),
) -> None:
    try:
        await template_repo.delete_template(template_id=template_id)
    except EntityDoesNotExist:
        raise await http_404_exc_id_not_found_request(entity="Template", id=template_id)

import logging

from fastapi import APIRouter, Depends, status

from app.api.http.errors import http_error
from app.core.auth import get_session, get_store
from app.domains.documents.errors import DocumentStoreError
from app.domains.documents.schemas import ErrorResponse
from app.domains.documents.store import DocumentStore
from app.domains.identity.session import SessionHolder
from app.domains.templates.schemas import (
    EmailTemplateCreate, EmailTemplateCreatedResponse,
    EmailTemplateListResponse, EmailTemplateResponse
)
from app.domains.templates.services import EmailTemplateService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


def get_template_service(
    store: DocumentStore = Depends(get_store),
    session: SessionHolder = Depends(get_session)
) -> EmailTemplateService:
    return EmailTemplateService(store, session)


@router.get("", response_model=EmailTemplateListResponse)
async def list_templates(service: EmailTemplateService = Depends(get_template_service)):
    """Получение списка шаблонов писем"""
    try:
        fetcher = await service.list_templates()
    except DocumentStoreError as e:
        raise http_error(e.info)

    if fetcher.error:
        raise http_error(fetcher.error)

    templates = [
        EmailTemplateResponse.model_validate(template)
        for template in service.to_templates(fetcher.data)
    ]
    return EmailTemplateListResponse(templates=templates, total=len(templates))


@router.get(
    "/{name}",
    response_model=EmailTemplateResponse,
    responses={404: {"model": ErrorResponse}}
)
async def get_template(name: str, service: EmailTemplateService = Depends(get_template_service)):
    """Получение шаблона по имени"""
    try:
        fetcher = await service.get_template(name)
    except DocumentStoreError as e:
        raise http_error(e.info)

    if fetcher.error:
        raise http_error(fetcher.error)

    return EmailTemplateResponse.model_validate(service.to_template(fetcher.data))


@router.post(
    "",
    response_model=EmailTemplateCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}}
)
async def create_template(
    template_data: EmailTemplateCreate,
    service: EmailTemplateService = Depends(get_template_service)
):
    """Создание шаблона письма"""
    setter = service.setter()
    try:
        document_name = await service.create_template(template_data, setter=setter)
    except DocumentStoreError as e:
        raise http_error(setter.error or e.info)

    return EmailTemplateCreatedResponse(id=document_name, name=template_data.name)

from app.domains.templates.entities import EmailTemplate, TemplateTag
from app.domains.templates.schemas import (
    EmailTemplateCreate, EmailTemplateResponse,
    EmailTemplateListResponse, EmailTemplateCreatedResponse
)
from app.domains.templates.services import EmailTemplateService

__all__ = [
    "EmailTemplate", "TemplateTag",
    "EmailTemplateCreate", "EmailTemplateResponse",
    "EmailTemplateListResponse", "EmailTemplateCreatedResponse",
    "EmailTemplateService"
]

from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional, List
from datetime import datetime

from app.domains.identity.schemas import AuditStampResponse
from app.domains.templates.entities import TemplateTag


class EmailTemplateCreate(BaseModel):
    """Схема для создания шаблона письма"""
    name: str = Field(..., min_length=1, max_length=255)
    subject: str = Field(..., min_length=1, max_length=998)
    tags: List[TemplateTag] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Name is required')
        if any(c.isspace() for c in v):
            raise ValueError('No spaces allowed')
        if '/' in v:
            raise ValueError('Name cannot contain "/"')
        return v

    @field_validator('subject')
    @classmethod
    def validate_subject(cls, v):
        if not v.strip():
            raise ValueError('Subject is required')
        return v.strip()


class EmailTemplateResponse(BaseModel):
    """Схема для ответа с данными шаблона"""
    id: str
    name: str
    subject: str
    html: str
    tags: List[str]
    created_on: Optional[datetime] = None
    last_updated_on: Optional[datetime] = None
    created_by: Optional[AuditStampResponse] = None
    last_updated_by: Optional[AuditStampResponse] = None

    model_config = ConfigDict(from_attributes=True)


class EmailTemplateListResponse(BaseModel):
    """Схема для списка шаблонов"""
    templates: List[EmailTemplateResponse]
    total: int


class EmailTemplateCreatedResponse(BaseModel):
    """Схема ответа на создание шаблона"""
    id: str
    name: str

from pydantic import BaseModel, EmailStr, ConfigDict
from typing import Optional


class IdentityResponse(BaseModel):
    """Схема для ответа с данными текущего пользователя"""
    id: str
    display_name: Optional[str] = None
    email: Optional[EmailStr] = None

    model_config = ConfigDict(from_attributes=True)


class AuditStampResponse(BaseModel):
    """Схема отметки автора изменения"""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from app.domains.documents.audit import audit_fields
from app.domains.documents.entities import StoredDocument
from app.domains.identity.entities import AuditStamp


class TemplateTag(str, Enum):
    """Метки шаблонов писем"""
    NOTIFICATION = "Notification"
    TRANSACTIONAL = "Transactional"
    PROMOTIONAL = "Promotional"
    CRITICAL = "Critical"


@dataclass
class EmailTemplate:
    """Шаблон письма. Тема может содержать переменные Handlebars."""

    subject: str
    html: str = ""
    tags: List[str] = field(default_factory=list)
    id: Optional[str] = None
    name: Optional[str] = None
    created_on: Optional[datetime] = None
    last_updated_on: Optional[datetime] = None
    created_by: Optional[AuditStamp] = None
    last_updated_by: Optional[AuditStamp] = None

    def to_fields(self) -> Dict[str, Any]:
        """Поля, которыми владеет вызывающий код"""
        return {
            "html": self.html,
            "subject": self.subject,
            "tags": [tag.value if isinstance(tag, Enum) else str(tag) for tag in self.tags],
        }

    @classmethod
    def from_document(cls, document: StoredDocument, name: Optional[str] = None) -> "EmailTemplate":
        data = document.data
        return cls(
            id=document.id,
            name=name or document.id,
            subject=data.get("subject", ""),
            html=data.get("html", ""),
            tags=list(data.get("tags") or []),
            **audit_fields(data)
        )

    def __repr__(self) -> str:
        return f"EmailTemplate(id={self.id}, subject={self.subject!r})"

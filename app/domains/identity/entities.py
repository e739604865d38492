from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class Identity:
    """Текущий пользователь, выданный провайдером идентификации"""

    id: str
    display_name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_token_payload(cls, payload: Dict[str, Any]) -> Optional["Identity"]:
        """Создание идентичности из claims токена"""
        subject = payload.get("sub")
        if not subject:
            return None
        return cls(
            id=str(subject),
            display_name=payload.get("name"),
            email=payload.get("email")
        )


@dataclass(frozen=True)
class AuditStamp:
    """Снимок идентичности на момент записи документа"""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_identity(cls, identity: Optional[Identity]) -> Optional["AuditStamp"]:
        if identity is None:
            return None
        return cls(id=identity.id, name=identity.display_name, email=identity.email)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["AuditStamp"]:
        if not data:
            return None
        return cls(id=data["id"], name=data.get("name"), email=data.get("email"))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}

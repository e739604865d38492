from app.domains.identity.entities import Identity, AuditStamp
from app.domains.identity.schemas import IdentityResponse, AuditStampResponse
from app.domains.identity.services import IdentityService
from app.domains.identity.session import SessionHolder

__all__ = [
    "Identity", "AuditStamp",
    "IdentityResponse", "AuditStampResponse",
    "IdentityService",
    "SessionHolder"
]

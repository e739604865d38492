from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.requests import HTTPConnection
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.domains.documents.store import DocumentStore
from app.domains.identity.entities import Identity
from app.domains.identity.services import IdentityService
from app.domains.identity.session import SessionHolder

security = HTTPBearer(auto_error=False)


async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[Identity]:
    """Текущий пользователь или None"""
    if credentials is None:
        return None
    return IdentityService.identity_from_token(credentials.credentials)


async def get_current_identity(
    identity: Optional[Identity] = Depends(get_optional_identity)
) -> Identity:
    """Зависимость для защищенных маршрутов"""
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


async def get_session(identity: Identity = Depends(get_current_identity)) -> SessionHolder:
    """Сессия запроса с текущим пользователем"""
    return SessionHolder(identity)


def get_store(connection: HTTPConnection) -> DocumentStore:
    """Хранилище документов приложения"""
    return connection.app.state.store

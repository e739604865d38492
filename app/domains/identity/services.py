import logging
from typing import Optional

from app.core.security import verify_token
from app.domains.identity.entities import Identity

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для получения идентичности из токенов провайдера"""

    @staticmethod
    def identity_from_token(token: Optional[str]) -> Optional[Identity]:
        """Получение текущего пользователя из JWT токена"""
        if not token:
            return None

        payload = verify_token(token)
        if payload is None:
            logger.info("Rejected invalid or expired token")
            return None

        return Identity.from_token_payload(payload)

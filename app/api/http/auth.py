from fastapi import APIRouter, Depends

from app.core.auth import get_current_identity
from app.domains.identity.entities import Identity
from app.domains.identity.schemas import IdentityResponse

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.get("/me", response_model=IdentityResponse)
async def get_current_user_info(identity: Identity = Depends(get_current_identity)):
    """Получение информации о текущем пользователе"""
    return IdentityResponse.model_validate(identity)

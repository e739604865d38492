from fastapi import HTTPException, status

from app.domains.documents.errors import (
    ErrorInfo, DOC_NOT_FOUND, NOT_FOUND, INVALID_ARGUMENT, PERMISSION_DENIED, ALREADY_EXISTS
)

_STATUS_BY_CODE = {
    DOC_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    NOT_FOUND: status.HTTP_404_NOT_FOUND,
    INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ALREADY_EXISTS: status.HTTP_409_CONFLICT,
}


def http_error(error: ErrorInfo) -> HTTPException:
    """Преобразование ошибки операции в HTTP-ответ"""
    return HTTPException(
        status_code=_STATUS_BY_CODE.get(error.code, status.HTTP_502_BAD_GATEWAY),
        detail=error.to_dict()
    )

from pydantic import BaseModel


class ErrorInfoResponse(BaseModel):
    """Схема ошибки операции"""
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Тело ответа с ошибкой"""
    detail: ErrorInfoResponse

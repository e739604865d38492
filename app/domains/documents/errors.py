from dataclasses import dataclass

DOC_NOT_FOUND = "doc-not-found"

# Коды ошибок хранилища
NOT_FOUND = "not-found"
INVALID_ARGUMENT = "invalid-argument"
ALREADY_EXISTS = "already-exists"
PERMISSION_DENIED = "permission-denied"
UNAVAILABLE = "unavailable"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class ErrorInfo:
    """Ошибка операции в виде {code, message}"""
    code: str
    message: str

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


DOCUMENT_NOT_FOUND = ErrorInfo(DOC_NOT_FOUND, "No document found.")


class DocumentStoreError(Exception):
    """Ошибка, возвращенная хранилищем документов"""

    def __init__(self, code: str, message: str):
        super().__init__(f"{message} [{code}]")
        self.code = code
        self.message = message

    @property
    def info(self) -> ErrorInfo:
        return ErrorInfo(self.code, self.message)

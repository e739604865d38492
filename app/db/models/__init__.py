from app.db.models.document import DocumentModel

__all__ = [
    "DocumentModel"
]

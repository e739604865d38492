from app.db.repositories.document_repository import SqlDocumentStore

__all__ = [
    "SqlDocumentStore"
]

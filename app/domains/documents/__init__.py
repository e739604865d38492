from app.domains.documents.accessors import (
    LoadStatus, OperationState,
    DocumentFetcher, CollectionFetcher, QueryFetcher,
    DocumentListener, CollectionListener, QueryListener,
    DocumentCreator, DocumentSetter, DocumentUpdater, DocumentDeleter
)
from app.domains.documents.entities import StoredDocument, Query, FieldFilter
from app.domains.documents.errors import ErrorInfo, DocumentStoreError, DOC_NOT_FOUND
from app.domains.documents.schemas import ErrorInfoResponse, ErrorResponse
from app.domains.documents.store import DocumentStore, Subscription

__all__ = [
    "LoadStatus", "OperationState",
    "DocumentFetcher", "CollectionFetcher", "QueryFetcher",
    "DocumentListener", "CollectionListener", "QueryListener",
    "DocumentCreator", "DocumentSetter", "DocumentUpdater", "DocumentDeleter",
    "StoredDocument", "Query", "FieldFilter",
    "ErrorInfo", "DocumentStoreError", "DOC_NOT_FOUND",
    "ErrorInfoResponse", "ErrorResponse",
    "DocumentStore", "Subscription"
]

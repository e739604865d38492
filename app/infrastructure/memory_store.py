import copy
import logging
from typing import Any, Dict, List, Mapping, Optional

from app.domains.documents.entities import StoredDocument
from app.domains.documents.errors import DocumentStoreError, NOT_FOUND
from app.domains.documents.fields import apply_update, merge_fields
from app.domains.documents.paths import (
    collection_path as normalize_collection_path,
    document_id,
    document_path,
    generate_document_id,
    join_path,
    parent_collection,
)
from app.domains.documents.store import DocumentStore

logger = logging.getLogger(__name__)


class MemoryDocumentStore(DocumentStore):
    """Хранилище документов в памяти процесса (локальный эмулятор и тесты)"""

    def __init__(self, documents: Optional[Mapping[str, Mapping[str, Any]]] = None):
        super().__init__()
        self._documents: Dict[str, Dict[str, Any]] = {}
        for path, data in (documents or {}).items():
            self._documents[document_path(path)] = copy.deepcopy(dict(data))

    async def get(self, path: str) -> Optional[StoredDocument]:
        path = document_path(path)
        data = self._documents.get(path)
        if data is None:
            return None
        return self._to_domain(path, data)

    async def get_all(self, collection_path: str) -> List[StoredDocument]:
        collection = normalize_collection_path(collection_path)
        paths = sorted(
            (path for path in self._documents if parent_collection(path) == collection),
            key=document_id
        )
        return [self._to_domain(path, self._documents[path]) for path in paths]

    async def add(self, collection_path: str, fields: Mapping[str, Any]) -> str:
        collection = normalize_collection_path(collection_path)
        new_id = generate_document_id()
        path = join_path(collection, new_id)
        self._documents[path] = copy.deepcopy(dict(fields))
        logger.debug(f"Document {path} created")
        await self._publish(path)
        return new_id

    async def set(
        self,
        path: str,
        fields: Mapping[str, Any],
        merge: bool = False,
        defaults: Optional[Mapping[str, Any]] = None
    ) -> None:
        path = document_path(path)
        existing = self._documents.get(path)

        if merge and existing is not None:
            data = merge_fields(existing, fields)
        else:
            data = merge_fields(defaults or {}, fields)

        self._documents[path] = data
        logger.debug(f"Document {path} set (merge={merge})")
        await self._publish(path)

    async def update(self, path: str, fields: Mapping[str, Any]) -> None:
        path = document_path(path)
        existing = self._documents.get(path)
        if existing is None:
            raise DocumentStoreError(NOT_FOUND, f"No document to update: {path}")

        self._documents[path] = apply_update(existing, fields)
        logger.debug(f"Document {path} updated")
        await self._publish(path)

    async def delete(self, path: str) -> None:
        path = document_path(path)
        if self._documents.pop(path, None) is not None:
            logger.debug(f"Document {path} deleted")
        await self._publish(path)

    def _to_domain(self, path: str, data: Mapping[str, Any]) -> StoredDocument:
        return StoredDocument(id=document_id(path), path=path, data=copy.deepcopy(dict(data)))

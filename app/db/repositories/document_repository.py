import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.document import DocumentModel
from app.domains.documents.entities import StoredDocument
from app.domains.documents.errors import DocumentStoreError, NOT_FOUND, UNAVAILABLE
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

_DATETIME_KEY = "__datetime__"


def encode_value(value: Any) -> Any:
    """Приведение данных документа к JSON (datetime хранится как ISO-строка)"""
    if isinstance(value, datetime):
        return {_DATETIME_KEY: value.isoformat()}
    if isinstance(value, Mapping):
        return {str(key): encode_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_value(item) for item in value]
    return value


def decode_value(value: Any) -> Any:
    if isinstance(value, dict):
        if set(value) == {_DATETIME_KEY}:
            return datetime.fromisoformat(value[_DATETIME_KEY])
        return {key: decode_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [decode_value(item) for item in value]
    return value


class SqlDocumentStore(DocumentStore):
    """Хранилище документов поверх SQLAlchemy: один документ - одна JSON-строка"""

    def __init__(self, session_factory):
        super().__init__()
        self.session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Database error: {e}")
                raise DocumentStoreError(UNAVAILABLE, str(e)) from e

    async def get(self, path: str) -> Optional[StoredDocument]:
        path = document_path(path)
        async with self._session() as session:
            db_document = await self._get_model(session, path)
            return self._to_domain(db_document) if db_document else None

    async def get_all(self, collection_path: str) -> List[StoredDocument]:
        collection = normalize_collection_path(collection_path)
        async with self._session() as session:
            result = await session.execute(
                select(DocumentModel)
                .where(DocumentModel.collection == collection)
                .order_by(DocumentModel.doc_id)
            )
            return [self._to_domain(doc) for doc in result.scalars().all()]

    async def add(self, collection_path: str, fields: Mapping[str, Any]) -> str:
        collection = normalize_collection_path(collection_path)
        new_id = generate_document_id()
        path = join_path(collection, new_id)

        async with self._session() as session:
            session.add(DocumentModel(
                path=path,
                collection=collection,
                doc_id=new_id,
                data=encode_value(fields)
            ))
            await session.commit()

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

        async with self._session() as session:
            db_document = await self._get_model(session, path)

            if merge and db_document is not None:
                data = merge_fields(decode_value(db_document.data), fields)
            else:
                data = merge_fields(defaults or {}, fields)

            if db_document is None:
                session.add(DocumentModel(
                    path=path,
                    collection=parent_collection(path),
                    doc_id=document_id(path),
                    data=encode_value(data)
                ))
            else:
                await session.execute(
                    update(DocumentModel)
                    .where(DocumentModel.path == path)
                    .values(data=encode_value(data))
                    .execution_options(synchronize_session=False)
                )
            await session.commit()

        await self._publish(path)

    async def update(self, path: str, fields: Mapping[str, Any]) -> None:
        path = document_path(path)

        async with self._session() as session:
            db_document = await self._get_model(session, path)
            if db_document is None:
                raise DocumentStoreError(NOT_FOUND, f"No document to update: {path}")

            data = apply_update(decode_value(db_document.data), fields)
            await session.execute(
                update(DocumentModel)
                .where(DocumentModel.path == path)
                .values(data=encode_value(data))
                .execution_options(synchronize_session=False)
            )
            await session.commit()

        await self._publish(path)

    async def delete(self, path: str) -> None:
        path = document_path(path)
        async with self._session() as session:
            await session.execute(delete(DocumentModel).where(DocumentModel.path == path))
            await session.commit()

        await self._publish(path)

    async def _get_model(self, session: AsyncSession, path: str) -> Optional[DocumentModel]:
        result = await session.execute(select(DocumentModel).where(DocumentModel.path == path))
        return result.scalar_one_or_none()

    def _to_domain(self, db_document: DocumentModel) -> StoredDocument:
        """Преобразование модели БД в документ хранилища"""
        data: Dict[str, Any] = decode_value(db_document.data or {})
        return StoredDocument(id=db_document.doc_id, path=db_document.path, data=data)

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, Union

from app.core.config import settings
from app.domains.documents.accessors import (
    CollectionFetcher, CollectionListener, DocumentFetcher, DocumentSetter,
    QueryFetcher, QueryListener
)
from app.domains.documents.audit import CREATED_BY
from app.domains.documents.entities import Query, StoredDocument
from app.domains.documents.errors import DocumentStoreError, PERMISSION_DENIED
from app.domains.documents.paths import collection_path as normalize_collection_path, join_path
from app.domains.documents.store import DocumentStore
from app.domains.identity.entities import Identity
from app.domains.identity.session import SessionHolder
from app.domains.templates.entities import EmailTemplate
from app.domains.templates.schemas import EmailTemplateCreate

logger = logging.getLogger(__name__)


class EmailTemplateService:
    """Сервис для работы с шаблонами писем.

    В режиме нескольких арендаторов имя документа получает префикс
    ``{id пользователя}_``, а список ограничивается шаблонами, созданными
    текущим пользователем.
    """

    def __init__(
        self,
        store: DocumentStore,
        session: SessionHolder,
        collection_path: Optional[str] = None,
        multi_tenant: Optional[bool] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.session = session
        self.collection_path = normalize_collection_path(
            collection_path or settings.templates_collection_path
        )
        self.multi_tenant = settings.multi_tenant_mode if multi_tenant is None else multi_tenant
        self.clock = clock

    def _require_identity(self) -> Identity:
        identity = self.session.current
        if identity is None:
            raise DocumentStoreError(PERMISSION_DENIED, "Sign-in required for multi-tenant templates")
        return identity

    def _prefix(self) -> str:
        return f"{self._require_identity().id}_"

    def document_name(self, name: str) -> str:
        """Имя документа для имени шаблона"""
        name = name.strip()
        if self.multi_tenant:
            return f"{self._prefix()}{name}"
        return name

    def display_name(self, document_id: str) -> str:
        """Имя шаблона для показа (без префикса пользователя)"""
        if self.multi_tenant:
            prefix = self._prefix()
            if document_id.startswith(prefix):
                return document_id[len(prefix):]
        return document_id

    def template_path(self, name: str) -> str:
        return join_path(self.collection_path, self.document_name(name))

    def listing_target(self) -> Union[str, Query]:
        """Путь коллекции или запрос по автору - в зависимости от режима"""
        if self.multi_tenant:
            return Query(self.collection_path).where(
                f"{CREATED_BY}.id", "==", self._require_identity().id
            )
        return self.collection_path

    def listener(self, on_change: Optional[Callable[[Any], None]] = None) -> Union[QueryListener, CollectionListener]:
        if self.multi_tenant:
            return QueryListener(self.store, on_change=on_change)
        return CollectionListener(self.store, on_change=on_change)

    def fetcher(self, on_change: Optional[Callable[[Any], None]] = None) -> Union[QueryFetcher, CollectionFetcher]:
        if self.multi_tenant:
            return QueryFetcher(self.store, on_change=on_change)
        return CollectionFetcher(self.store, on_change=on_change)

    def setter(self, on_change: Optional[Callable[[Any], None]] = None) -> DocumentSetter:
        return DocumentSetter(self.store, self.session, clock=self.clock, on_change=on_change)

    def to_template(self, document: StoredDocument) -> EmailTemplate:
        return EmailTemplate.from_document(document, name=self.display_name(document.id))

    def to_templates(self, documents: Optional[List[StoredDocument]]) -> List[EmailTemplate]:
        return [self.to_template(document) for document in documents or []]

    async def create_template(
        self,
        template_data: EmailTemplateCreate,
        setter: Optional[DocumentSetter] = None
    ) -> str:
        """Создание шаблона с пустым телом; возвращает имя документа"""
        setter = setter or self.setter()
        setter.reset()

        template = EmailTemplate(
            subject=template_data.subject.strip(),
            html="",
            tags=[tag.value for tag in template_data.tags]
        )
        path = self.template_path(template_data.name)
        await setter.set(path, template)

        logger.info(f"Email template created: {path}")
        return self.document_name(template_data.name)

    async def get_template(self, name: str) -> DocumentFetcher:
        """Однократная загрузка шаблона по имени"""
        fetcher = DocumentFetcher(self.store)
        await fetcher.fetch(self.template_path(name))
        return fetcher

    async def list_templates(self) -> Union[QueryFetcher, CollectionFetcher]:
        """Однократная загрузка списка шаблонов"""
        fetcher = self.fetcher()
        await fetcher.fetch(self.listing_target())
        return fetcher

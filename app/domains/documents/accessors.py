"""Слой доступа к данным поверх ``DocumentStore``.

Читатели (однократная загрузка и подписки) и мутаторы (create/set/update/
delete) хранят собственное асинхронное состояние, по которому слой
представления перерисовывает себя. Каждое изменение состояния сообщается
через необязательный колбэк ``on_change``.
"""
import asyncio
import functools
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Tuple, Union

from app.domains.documents.audit import (
    caller_fields, creation_fields, creation_stamp, update_fields, update_stamp, utcnow
)
from app.domains.documents.entities import Query, StoredDocument
from app.domains.documents.errors import DOCUMENT_NOT_FOUND, DocumentStoreError, ErrorInfo, UNKNOWN
from app.domains.documents.paths import collection_path, document_path
from app.domains.documents.store import DocumentStore, Snapshot, Subscription
from app.domains.identity.entities import AuditStamp
from app.domains.identity.session import SessionHolder

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class OperationState:
    """Состояние одного вызова мутатора"""
    is_loading: bool = False
    is_completed: bool = False
    error: Optional[ErrorInfo] = None


IDLE = OperationState()


class _Observable:
    def __init__(self, on_change: Optional[Callable[[Any], None]] = None):
        self._on_change = on_change

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)


class _Reader(_Observable):
    """Общее состояние читателей: ключ, данные, ошибка, статус"""

    def __init__(self, store: DocumentStore, on_change: Optional[Callable[[Any], None]] = None):
        super().__init__(on_change)
        self.store = store
        self.key: Any = None
        self.data: Any = None
        self.error: Optional[ErrorInfo] = None
        self.status = LoadStatus.PENDING
        self._generation = 0

    @property
    def loading(self) -> bool:
        return self.data is None and self.error is None

    def _begin(self, key: Any) -> int:
        self.key = key
        self._generation += 1
        self.data = None
        self.error = None
        self.status = LoadStatus.PENDING
        self._notify()
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _translate(self, snapshot: Snapshot) -> Tuple[Any, Optional[ErrorInfo]]:
        return snapshot, None

    def _resolve(self, generation: int, snapshot: Snapshot) -> None:
        if not self._is_current(generation):
            logger.debug(f"Discarding stale result (generation {generation}, current {self._generation})")
            return
        self.data, self.error = self._translate(snapshot)
        self.status = LoadStatus.FAILED if self.error else LoadStatus.READY
        self._notify()

    def _reject(self, generation: int, error: DocumentStoreError) -> None:
        if not self._is_current(generation):
            logger.debug(f"Discarding stale error (generation {generation}): {error}")
            return
        logger.error(f"Reading {self.key!r} failed: {error}")
        self.data = None
        self.error = error.info
        self.status = LoadStatus.FAILED
        self._notify()


class _SingleDocumentMixin:
    """Отсутствие документа превращается в явную ошибку doc-not-found"""

    def _translate(self, snapshot: Optional[StoredDocument]) -> Tuple[Any, Optional[ErrorInfo]]:
        if snapshot is None:
            return None, DOCUMENT_NOT_FOUND
        return snapshot, None


# Однократная загрузка

class _Fetcher(_Reader):

    def __init__(self, store: DocumentStore, on_change: Optional[Callable[[Any], None]] = None):
        super().__init__(store, on_change)
        self._task: Optional[asyncio.Task] = None

    def fetch(self, key: Any) -> asyncio.Task:
        """Запуск загрузки; повторный вызов с тем же ключом ничего не делает"""
        if self._task is not None and key == self.key:
            return self._task
        return self.refresh(key)

    def refresh(self, key: Any = None) -> asyncio.Task:
        """Принудительная загрузка (по умолчанию для текущего ключа)"""
        if key is None:
            key = self.key
        generation = self._begin(key)
        self._task = asyncio.ensure_future(self._run(generation, key))
        return self._task

    async def wait(self) -> None:
        """Ожидание загрузки для текущего ключа"""
        if self._task is not None:
            await self._task

    async def _run(self, generation: int, key: Any) -> None:
        try:
            snapshot = await self._load(key)
        except DocumentStoreError as e:
            self._reject(generation, e)
        except Exception as e:
            logger.exception(f"Loading {key!r} failed unexpectedly")
            self._reject(generation, DocumentStoreError(UNKNOWN, str(e)))
        else:
            self._resolve(generation, snapshot)

    async def _load(self, key: Any) -> Snapshot:
        raise NotImplementedError


class DocumentFetcher(_SingleDocumentMixin, _Fetcher):
    """Однократная загрузка документа по пути"""

    data: Optional[StoredDocument]

    async def _load(self, key: str) -> Optional[StoredDocument]:
        return await self.store.get(key)


class CollectionFetcher(_Fetcher):
    """Однократная загрузка всех документов коллекции"""

    data: Optional[List[StoredDocument]]

    async def _load(self, key: str) -> List[StoredDocument]:
        return await self.store.get_all(key)


class QueryFetcher(_Fetcher):
    """Однократная загрузка документов по запросу"""

    data: Optional[List[StoredDocument]]

    async def _load(self, key: Query) -> List[StoredDocument]:
        return await self.store.run_query(key)


# Подписки

class _Listener(_Reader):

    def __init__(self, store: DocumentStore, on_change: Optional[Callable[[Any], None]] = None):
        super().__init__(store, on_change)
        self._subscription: Optional[Subscription] = None
        self._listening = False

    async def listen(self, key: Any) -> None:
        """Подписка на ключ; равный ключ не приводит к переподписке"""
        if self._listening and key == self.key:
            return

        self._release()
        generation = self._begin(key)
        self._listening = True

        try:
            target = self._target(key)
        except DocumentStoreError as e:
            self._reject(generation, e)
            return

        subscription = await self.store.subscribe(
            target,
            functools.partial(self._resolve, generation),
            functools.partial(self._reject, generation)
        )

        if self._is_current(generation) and self._listening:
            self._subscription = subscription
        else:
            subscription.close()

    def close(self) -> None:
        """Отписка; после нее состояние больше не меняется"""
        self._release()
        self._listening = False
        self._generation += 1

    def _target(self, key: Any) -> Any:
        return key

    def _release(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()


class DocumentListener(_SingleDocumentMixin, _Listener):
    """Подписка на документ по пути"""

    def _target(self, key: str) -> str:
        return document_path(key)


class CollectionListener(_Listener):
    """Подписка на все документы коллекции"""

    def _target(self, key: str) -> str:
        return collection_path(key)


class QueryListener(_Listener):
    """Подписка на документы по запросу (запросы сравниваются по значению)"""


# Мутаторы

class _Mutator(_Observable):

    def __init__(
        self,
        store: DocumentStore,
        session: Optional[SessionHolder] = None,
        clock: Optional[Callable[[], datetime]] = None,
        on_change: Optional[Callable[[Any], None]] = None
    ):
        super().__init__(on_change)
        self.store = store
        self.session = session
        self.clock = clock or utcnow
        self.state = IDLE

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def is_completed(self) -> bool:
        return self.state.is_completed

    @property
    def error(self) -> Optional[ErrorInfo]:
        return self.state.error

    def reset(self) -> None:
        """Сброс состояния перед повторным использованием"""
        self._set_state(IDLE)

    def _stamp(self) -> Optional[AuditStamp]:
        # Идентичность читается в момент вызова, а не по завершении
        identity = self.session.current if self.session is not None else None
        return AuditStamp.from_identity(identity)

    def _set_state(self, state: OperationState) -> None:
        self.state = state
        self._notify()

    async def _execute(self, description: str, operation: Awaitable) -> Any:
        self._set_state(OperationState(is_loading=True))
        try:
            result = await operation
        except DocumentStoreError as e:
            logger.error(f"{description} failed: {e}")
            self._set_state(OperationState(error=e.info))
            raise
        except Exception as e:
            logger.exception(f"{description} failed unexpectedly")
            self._set_state(OperationState(error=ErrorInfo(UNKNOWN, str(e))))
            raise
        self._set_state(OperationState(is_completed=True))
        return result


class DocumentCreator(_Mutator):
    """Создание документа со сгенерированным идентификатором"""

    async def create(self, collection_path: str, payload: Any) -> str:
        fields = creation_fields(payload, self._stamp(), self.clock())
        return await self._execute(
            f"Create in {collection_path}",
            self.store.add(collection_path, fields)
        )


class DocumentSetter(_Mutator):
    """Запись документа по явному пути"""

    async def set(self, path: str, payload: Any, merge: bool = False) -> None:
        stamp = self._stamp()
        now = self.clock()
        fields = caller_fields(payload)
        fields.update(update_stamp(stamp, now))

        await self._execute(
            f"Set {path}",
            self.store.set(path, fields, merge=merge, defaults=creation_stamp(stamp, now))
        )
        return None


class DocumentUpdater(_Mutator):
    """Частичное обновление существующего документа"""

    async def update(self, path: str, payload: Any) -> None:
        fields = update_fields(payload, self._stamp(), self.clock())
        await self._execute(f"Update {path}", self.store.update(path, fields))


class DocumentDeleter(_Mutator):
    """Удаление документа по пути"""

    async def delete(self, path: str) -> None:
        await self._execute(f"Delete {path}", self.store.delete(path))


Listener = Union[DocumentListener, CollectionListener, QueryListener]

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Mapping, Optional, Union

from app.domains.documents.entities import Query, StoredDocument
from app.domains.documents.errors import DocumentStoreError, UNKNOWN
from app.domains.documents.paths import is_document_path, parent_collection, split_path

logger = logging.getLogger(__name__)

# Цель подписки: путь документа, путь коллекции или запрос
Target = Union[str, Query]
Snapshot = Union[Optional[StoredDocument], List[StoredDocument]]


class Subscription:
    """Дескриптор подписки; после close() колбэки больше не вызываются"""

    def __init__(
        self,
        store: "DocumentStore",
        target: Target,
        on_next: Callable[[Snapshot], None],
        on_error: Callable[[DocumentStoreError], None]
    ):
        self.store = store
        self.target = target
        self._on_next = on_next
        self._on_error = on_error
        self.closed = False

    def deliver(self, snapshot: Snapshot) -> None:
        if not self.closed:
            self._dispatch(self._on_next, snapshot)

    def fail(self, error: DocumentStoreError) -> None:
        if not self.closed:
            self._dispatch(self._on_error, error)

    def _dispatch(self, callback: Callable[[Any], None], value: Any) -> None:
        # Ошибка подписчика не должна влиять на запись и других подписчиков
        try:
            callback(value)
        except Exception:
            logger.exception(f"Subscriber of {self.target!r} failed")

    def affected_by(self, path: str) -> bool:
        """Затрагивает ли запись по пути документа эту подписку"""
        if isinstance(self.target, Query):
            return self.target.collection_path == parent_collection(path)
        try:
            target = "/".join(split_path(self.target))
        except DocumentStoreError:
            return False
        return target == path or target == parent_collection(path)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.store._discard(self)
        logger.debug(f"Subscription to {self.target!r} closed")

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()


class DocumentStore(ABC):
    """Хранилище документов, адресуемых путями.

    Все операции асинхронные; любая ошибка хранилища - ``DocumentStoreError``.
    Подписки общие для всех реализаций: начальный снимок доставляется до
    возврата из ``subscribe``, а каждая запись заново доставляет снимки
    затронутым подпискам в порядке записи.
    """

    def __init__(self):
        self._subscriptions: List[Subscription] = []

    @abstractmethod
    async def get(self, path: str) -> Optional[StoredDocument]:
        """Документ по пути или None, если его нет"""

    @abstractmethod
    async def get_all(self, collection_path: str) -> List[StoredDocument]:
        """Все документы коллекции, упорядоченные по идентификатору"""

    async def run_query(self, query: Query) -> List[StoredDocument]:
        """Документы коллекции, удовлетворяющие запросу"""
        return query.apply(await self.get_all(query.collection_path))

    @abstractmethod
    async def add(self, collection_path: str, fields: Mapping[str, Any]) -> str:
        """Создание документа со сгенерированным идентификатором"""

    @abstractmethod
    async def set(
        self,
        path: str,
        fields: Mapping[str, Any],
        merge: bool = False,
        defaults: Optional[Mapping[str, Any]] = None
    ) -> None:
        """Запись документа по пути.

        ``merge`` сливает поля с существующим документом вместо замены.
        ``defaults`` записываются только если документа еще нет или
        слияние выключено.
        """

    @abstractmethod
    async def update(self, path: str, fields: Mapping[str, Any]) -> None:
        """Частичное обновление; ошибка not-found, если документа нет"""

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Удаление документа (отсутствие документа не ошибка)"""

    async def subscribe(
        self,
        target: Target,
        on_next: Callable[[Snapshot], None],
        on_error: Callable[[DocumentStoreError], None]
    ) -> Subscription:
        """Подписка на документ, коллекцию или запрос"""
        subscription = Subscription(self, target, on_next, on_error)
        self._subscriptions.append(subscription)
        logger.debug(f"Subscribed to {target!r}")
        await self._push(subscription)
        return subscription

    async def snapshot(self, target: Target) -> Snapshot:
        """Текущее значение цели подписки"""
        if isinstance(target, Query):
            return await self.run_query(target)
        if is_document_path(target):
            return await self.get(target)
        return await self.get_all(target)

    async def _push(self, subscription: Subscription) -> None:
        try:
            snapshot = await self.snapshot(subscription.target)
        except DocumentStoreError as e:
            logger.error(f"Snapshot for {subscription.target!r} failed: {e}")
            subscription.fail(e)
        except Exception as e:
            logger.exception(f"Snapshot for {subscription.target!r} failed unexpectedly")
            subscription.fail(DocumentStoreError(UNKNOWN, str(e)))
        else:
            subscription.deliver(snapshot)

    async def _publish(self, path: str) -> None:
        """Рассылка новых снимков подпискам, затронутым записью по пути"""
        for subscription in list(self._subscriptions):
            if not subscription.closed and subscription.affected_by(path):
                await self._push(subscription)

    def _discard(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

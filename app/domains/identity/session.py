import logging
from typing import Callable, List, Optional

from app.domains.identity.entities import Identity

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Optional[Identity]], None]


class SessionHolder:
    """Хранит текущую идентичность; слой доступа к данным только читает ее"""

    def __init__(self, identity: Optional[Identity] = None):
        self._identity = identity
        self._listeners: List[IdentityListener] = []

    @property
    def current(self) -> Optional[Identity]:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def sign_in(self, identity: Identity) -> None:
        self._set(identity)

    def sign_out(self) -> None:
        self._set(None)

    def add_listener(self, listener: IdentityListener) -> Callable[[], None]:
        """Подписка на смену пользователя; возвращает функцию отписки"""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _set(self, identity: Optional[Identity]) -> None:
        self._identity = identity
        logger.info(f"User changed: {identity.id if identity else None}")
        for listener in list(self._listeners):
            listener(identity)

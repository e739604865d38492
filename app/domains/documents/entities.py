import operator
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from app.domains.documents.errors import DocumentStoreError, INVALID_ARGUMENT
from app.domains.documents.fields import get_field, has_field
from app.domains.documents.paths import collection_path as normalize_collection_path


@dataclass
class StoredDocument:
    """Документ хранилища: идентификатор, путь и данные"""

    id: str
    path: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Данные документа вместе с его идентификатором"""
        result = dict(self.data)
        result["id"] = self.id
        return result

    def __repr__(self) -> str:
        return f"StoredDocument(path={self.path})"


_COMPARISONS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

SUPPORTED_OPERATORS = tuple(_COMPARISONS) + ("in", "array-contains")


@dataclass(frozen=True)
class FieldFilter:
    """Условие запроса по полю"""

    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in SUPPORTED_OPERATORS:
            raise DocumentStoreError(INVALID_ARGUMENT, f"Unsupported operator: {self.op!r}")

    def matches(self, data: Dict[str, Any]) -> bool:
        # Документы без поля не попадают в выборку
        if not has_field(data, self.field):
            return False
        actual = get_field(data, self.field)

        if self.op == "in":
            return actual in self.value
        if self.op == "array-contains":
            return isinstance(actual, list) and self.value in actual

        try:
            return bool(_COMPARISONS[self.op](actual, self.value))
        except TypeError:
            return False


@dataclass(frozen=True)
class Query:
    """Описание запроса к коллекции; сравнивается по значению"""

    collection_path: str
    filters: Tuple[FieldFilter, ...] = ()
    order_by: Optional[str] = None
    descending: bool = False
    limit: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "collection_path", normalize_collection_path(self.collection_path))
        object.__setattr__(self, "filters", tuple(self.filters))

    def where(self, field_path: str, op: str, value: Any) -> "Query":
        return replace(self, filters=self.filters + (FieldFilter(field_path, op, value),))

    def ordered_by(self, field_path: str, descending: bool = False) -> "Query":
        return replace(self, order_by=field_path, descending=descending)

    def limited_to(self, limit: int) -> "Query":
        return replace(self, limit=limit)

    def apply(self, documents: List[StoredDocument]) -> List[StoredDocument]:
        """Фильтрация, сортировка и ограничение списка документов коллекции"""
        result = [doc for doc in documents if all(f.matches(doc.data) for f in self.filters)]

        if self.order_by:
            result = [doc for doc in result if has_field(doc.data, self.order_by)]
            result.sort(
                key=lambda doc: get_field(doc.data, self.order_by),
                reverse=self.descending
            )

        if self.limit is not None:
            result = result[:self.limit]
        return result

import uuid
from typing import List

from app.domains.documents.errors import DocumentStoreError, INVALID_ARGUMENT


def split_path(path: str) -> List[str]:
    """Разбиение пути на сегменты с проверкой"""
    if not isinstance(path, str) or not path.strip("/"):
        raise DocumentStoreError(INVALID_ARGUMENT, f"Invalid path: {path!r}")

    segments = path.strip("/").split("/")
    if any(not segment.strip() for segment in segments):
        raise DocumentStoreError(INVALID_ARGUMENT, f"Path contains an empty segment: {path!r}")
    return segments


def is_document_path(path: str) -> bool:
    """Четное число сегментов - документ, нечетное - коллекция"""
    return len(split_path(path)) % 2 == 0


def document_path(path: str) -> str:
    segments = split_path(path)
    if len(segments) % 2 != 0:
        raise DocumentStoreError(
            INVALID_ARGUMENT,
            f"Document path must have an even number of segments: {path!r}"
        )
    return "/".join(segments)


def collection_path(path: str) -> str:
    segments = split_path(path)
    if len(segments) % 2 != 1:
        raise DocumentStoreError(
            INVALID_ARGUMENT,
            f"Collection path must have an odd number of segments: {path!r}"
        )
    return "/".join(segments)


def parent_collection(path: str) -> str:
    return "/".join(split_path(document_path(path))[:-1])


def document_id(path: str) -> str:
    return split_path(document_path(path))[-1]


def join_path(*parts: str) -> str:
    return "/".join(part.strip("/") for part in parts)


def generate_document_id() -> str:
    """Идентификатор документа из 20 символов"""
    return uuid.uuid4().hex[:20]

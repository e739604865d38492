import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from app.domains.identity.entities import AuditStamp

logger = logging.getLogger(__name__)

CREATED_ON = "createdOn"
CREATED_BY = "createdBy"
LAST_UPDATED_ON = "lastUpdatedOn"
LAST_UPDATED_BY = "lastUpdatedBy"

# Поля, которыми владеет система; вызывающий код их не задает
SYSTEM_FIELDS = frozenset({CREATED_ON, CREATED_BY, LAST_UPDATED_ON, LAST_UPDATED_BY})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def caller_fields(payload: Any) -> Dict[str, Any]:
    """Поля вызывающего кода без системных полей"""
    if hasattr(payload, "to_fields"):
        fields = dict(payload.to_fields())
    else:
        fields = dict(payload or {})

    # Ключ с точкой адресует вложенное поле, поэтому проверяется первый сегмент
    overlap = {key for key in fields if str(key).split(".", 1)[0] in SYSTEM_FIELDS}
    if overlap:
        logger.warning(f"Ignoring system-owned fields in payload: {sorted(overlap)}")
        for key in overlap:
            del fields[key]
    return fields


def _stamp_value(stamp: Optional[AuditStamp]) -> Optional[Dict[str, Any]]:
    return stamp.to_dict() if stamp else None


def creation_stamp(stamp: Optional[AuditStamp], now: datetime) -> Dict[str, Any]:
    return {CREATED_ON: now, CREATED_BY: _stamp_value(stamp)}


def update_stamp(stamp: Optional[AuditStamp], now: datetime) -> Dict[str, Any]:
    return {LAST_UPDATED_ON: now, LAST_UPDATED_BY: _stamp_value(stamp)}


def creation_fields(payload: Any, stamp: Optional[AuditStamp], now: datetime) -> Dict[str, Any]:
    """Поля нового документа: данные вызывающего кода плюс все отметки"""
    fields = caller_fields(payload)
    fields.update(creation_stamp(stamp, now))
    fields.update(update_stamp(stamp, now))
    return fields


def update_fields(payload: Any, stamp: Optional[AuditStamp], now: datetime) -> Dict[str, Any]:
    """Поля частичного обновления: только отметки последнего изменения"""
    fields = caller_fields(payload)
    fields.update(update_stamp(stamp, now))
    return fields


def audit_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Системные поля документа в виде объектов домена"""
    return {
        "created_on": data.get(CREATED_ON),
        "last_updated_on": data.get(LAST_UPDATED_ON),
        "created_by": AuditStamp.from_dict(data.get(CREATED_BY)),
        "last_updated_by": AuditStamp.from_dict(data.get(LAST_UPDATED_BY)),
    }

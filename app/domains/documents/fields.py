"""Работа с полями документов: вложенные пути через точку и слияние карт."""
import copy
from typing import Any, Dict, Mapping

_MISSING = object()


def get_field(data: Mapping[str, Any], field_path: str, default: Any = None) -> Any:
    """Значение поля по пути вида ``createdBy.id``"""
    current: Any = data
    for part in field_path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def has_field(data: Mapping[str, Any], field_path: str) -> bool:
    return get_field(data, field_path, _MISSING) is not _MISSING


def merge_fields(existing: Mapping[str, Any], fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Глубокое слияние: вложенные карты объединяются, остальное заменяется"""
    merged = copy.deepcopy(dict(existing))
    for key, value in fields.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_fields(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def apply_update(existing: Mapping[str, Any], fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Частичное обновление: ключи с точкой меняют вложенное поле"""
    updated = copy.deepcopy(dict(existing))
    for key, value in fields.items():
        parts = key.split(".")
        target = updated
        for part in parts[:-1]:
            if not isinstance(target.get(part), dict):
                target[part] = {}
            target = target[part]
        target[parts[-1]] = copy.deepcopy(value)
    return updated

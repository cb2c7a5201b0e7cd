"""Serialization helpers shared by the document models.

Models are dataclasses with snake_case attributes; the persisted JSON uses the
camelCase keys of the template store (``xMm``, ``visibleIf``, ``widthFr``...).
"""

from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from ..exceptions import DocumentFormatError

logger = logging.getLogger(__name__)


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _dump(value: Any) -> Any:
    if is_dataclass(value) and hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value


def dump_fields(obj: Any, skip: Iterable[str] = (), omit_none: bool = False) -> Dict[str, Any]:
    """Dump the dataclass fields of ``obj`` under camelCase keys."""
    skipped = set(skip)
    out: Dict[str, Any] = {}
    for f in fields(obj):
        if f.name in skipped:
            continue
        value = getattr(obj, f.name)
        if omit_none and value is None:
            continue
        out[to_camel(f.name)] = _dump(value)
    return out


def load_fields(cls: type, data: Mapping[str, Any], skip: Iterable[str] = ()) -> Dict[str, Any]:
    """Collect constructor kwargs of ``cls`` present in ``data`` (camelCase keys)."""
    skipped = set(skip)
    kwargs: Dict[str, Any] = {}
    for f in fields(cls):
        if f.name in skipped or not f.init:
            continue
        key = to_camel(f.name)
        if key in data:
            kwargs[f.name] = data[key]
    return kwargs


def require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DocumentFormatError(f"Invalid {what}", f"expected an object, got {type(value).__name__}")
    return value


def as_float(value: Any, default: Optional[float]) -> Optional[float]:
    """Coerce a JSON number; malformed values fall back to ``default``."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric value {value!r}")
        return default


def as_int(value: Any, default: int) -> int:
    number = as_float(value, None)
    return default if number is None else int(number)


def as_text(value: Any, default: Optional[str] = None) -> Optional[str]:
    """Coerce a JSON scalar to ``str``; ``None`` and containers give ``default``."""
    if value is None or isinstance(value, (Mapping, list)):
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def as_choice(value: Any, choices: Iterable[str], default: Optional[str]) -> Optional[str]:
    """Keep ``value`` only when it is one of ``choices``."""
    if isinstance(value, str) and value in choices:
        return value
    if value is not None:
        logger.debug(f"Ignoring unsupported value {value!r}")
    return default


def as_flag(value: Any, default: Optional[bool]) -> Optional[bool]:
    return default if value is None else bool(value)

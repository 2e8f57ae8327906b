"""Query string, form and JSON encoders used by the request builder."""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Mapping

import httpx
import pydantic_core
from pydantic import BaseModel

from .exceptions import SerializationError


def _scalar(value: Any, target: str) -> str:
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise SerializationError(
        f"unsupported value type {type(value).__name__}", target
    )


def to_pairs(value: Any, target: str = "query") -> list[tuple[str, str]]:
    """Flatten a mapping, pair sequence, dataclass or model into pairs.

    List and tuple values become repeated keys, ``None`` values are left
    out and nested mappings are rejected.
    """
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True)
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)

    if isinstance(value, Mapping):
        items = list(value.items())
    elif isinstance(value, (str, bytes)):
        raise SerializationError(
            "top-level value must be a mapping or a sequence of pairs", target
        )
    else:
        try:
            items = list(value)
        except TypeError:
            raise SerializationError(
                f"unsupported top-level type {type(value).__name__}", target
            ) from None

    pairs: list[tuple[str, str]] = []
    for item in items:
        try:
            key, val = item
        except (TypeError, ValueError):
            raise SerializationError(f"expected a key/value pair, got {item!r}", target) from None
        key = _scalar(key, target)
        if val is None:
            continue
        if isinstance(val, (list, tuple)):
            pairs.extend((key, _scalar(v, target)) for v in val if v is not None)
        else:
            pairs.append((key, _scalar(val, target)))
    return pairs


def urlencode(value: Any, target: str = "query") -> str:
    """Serialize ``value`` to ``k=v&k2=v2``."""
    return str(httpx.QueryParams(to_pairs(value, target)))


def to_json(value: Any) -> bytes:
    """Serialize ``value`` to compact JSON bytes."""
    try:
        return pydantic_core.to_json(value)
    except pydantic_core.PydanticSerializationError as e:
        raise SerializationError(str(e), "json") from e

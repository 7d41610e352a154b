"""Cache payload serialization using orjson.

Cache entries and the derived values inside them are stored in Redis as
JSON. Each element is wrapped in a small type envelope so that values which
JSON cannot distinguish (tuples vs lists, datetimes vs strings, pydantic
models vs dicts) come back as the type that was stored.
"""

from __future__ import annotations

import importlib
from datetime import date, datetime
from typing import Any, Type

import orjson
from pydantic import BaseModel


def serialize(value: Any) -> str:
    """Serialize a value to a JSON string for Redis storage."""
    return orjson.dumps(_wrap(value)).decode("utf-8")


def deserialize(raw: str | bytes) -> Any:
    """Deserialize a JSON string from Redis back to the stored type.

    Raises:
        ValueError: payload is not valid JSON or carries an unknown envelope.
    """
    try:
        envelope = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise ValueError(f"Cache payload is not valid JSON: {e}") from e
    return _unwrap(envelope)


def _wrap(item: Any) -> dict:
    if isinstance(item, BaseModel):
        return {
            "_type": "pydantic",
            "_model": f"{item.__class__.__module__}.{item.__class__.__name__}",
            "data": item.model_dump(mode="json"),
        }
    if isinstance(item, datetime):
        return {"_type": "datetime", "data": item.isoformat()}
    if isinstance(item, date):
        return {"_type": "date", "data": item.isoformat()}
    if isinstance(item, tuple):
        return {"_type": "tuple", "data": [_wrap(sub) for sub in item]}
    if isinstance(item, list):
        return {"_type": "list", "data": [_wrap(sub) for sub in item]}
    if isinstance(item, dict):
        return {"_type": "dict", "data": {str(k): _wrap(v) for k, v in item.items()}}
    return {"_type": "plain", "data": item}


def _unwrap(envelope: Any) -> Any:
    if not isinstance(envelope, dict) or "_type" not in envelope:
        raise ValueError("Cache payload is missing its type envelope")

    t = envelope["_type"]
    data = envelope.get("data")

    if t == "plain":
        return data
    if t == "pydantic":
        model_path = envelope.get("_model")
        if not isinstance(model_path, str) or "." not in model_path:
            raise ValueError("Pydantic envelope is missing its model path")
        return _resolve_model(model_path).model_validate(data)
    if t in ("datetime", "date"):
        if not isinstance(data, str):
            raise ValueError(f"{t} envelope must carry an ISO string")
        parse = datetime.fromisoformat if t == "datetime" else date.fromisoformat
        return parse(data)
    if t in ("tuple", "list"):
        if not isinstance(data, list):
            raise ValueError(f"{t} envelope must carry a JSON array")
        items = [_unwrap(elem) for elem in data]
        return tuple(items) if t == "tuple" else items
    if t == "dict":
        if not isinstance(data, dict):
            raise ValueError("dict envelope must carry a JSON object")
        return {k: _unwrap(v) for k, v in data.items()}
    raise ValueError(f"Unknown cache envelope type: {t!r}")


def _resolve_model(model_path: str) -> Type[BaseModel]:
    """Resolve a Pydantic model class from its module.ClassName string."""
    module_name, class_name = model_path.rsplit(".", 1)
    module = importlib.import_module(module_name)
    cls = getattr(module, class_name, None)
    if not (isinstance(cls, type) and issubclass(cls, BaseModel)):
        raise ValueError(f"{model_path} is not a Pydantic BaseModel subclass")
    return cls

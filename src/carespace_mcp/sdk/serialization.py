"""
JSON bridge between model dataclasses and request/response text.

The transport only ever sees text; these helpers are called by the
domain wrappers before send() and after completion.
"""

import json
from typing import Any, List, Optional, Type, TypeVar

T = TypeVar("T")


def encode(obj: Any) -> str:
    """Serialize a model (anything with to_dict) or a plain dict to JSON text."""
    if hasattr(obj, "to_dict"):
        obj = obj.to_dict()
    return json.dumps(obj)


def decode(text: str, shape: Type[T]) -> Optional[T]:
    """Parse JSON text into `shape` via shape.from_dict.

    Returns None when the text is not a JSON object.
    """
    data = _loads(text)
    if not isinstance(data, dict):
        return None
    return shape.from_dict(data)


def unwrap(text: str) -> Any:
    """Return the `data` member of a response envelope.

    Bodies that are not an envelope are returned as parsed.
    Returns None when the body is not JSON.
    """
    data = _loads(text)
    if isinstance(data, dict) and "data" in data:
        return data["data"]
    return data


def decode_item(text: str, shape: Type[T], key: str) -> Optional[T]:
    """Decode a single item from `data` or `data.<key>`."""
    data = unwrap(text)
    if isinstance(data, dict) and isinstance(data.get(key), dict):
        data = data[key]
    if not isinstance(data, dict):
        return None
    return shape.from_dict(data)


def decode_list(text: str, shape: Type[T], key: str) -> Optional[List[T]]:
    """Decode a list payload given as `data: [...]` or `data: {key: [...]}`.

    A JSON body holding neither form decodes to an empty list.
    Returns None only when the body is not JSON.
    """
    data = unwrap(text)
    if data is None:
        return None
    if isinstance(data, dict):
        data = data.get(key)
    if not isinstance(data, list):
        return []
    return [shape.from_dict(item) for item in data if isinstance(item, dict)]


def _loads(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None

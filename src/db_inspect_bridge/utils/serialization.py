"""JSON serialization of protocol values using orjson.

orjson covers the primitives flattened rows are made of except binary cells,
and knows nothing about pydantic models. Both are handled here.
"""

import base64
from typing import Any

import orjson
from pydantic import BaseModel


def encode_blob(data: bytes) -> str:
    """UTF-8 text when the blob decodes cleanly, base64 otherwise."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return base64.b64encode(data).decode("ascii")


def _default_handler(obj: Any) -> Any:
    """
    Custom default handler for types orjson doesn't handle natively.

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable representation

    Raises:
        TypeError: If object cannot be serialized
    """
    # Wire models dump with camelCase aliases and without unset fields
    if isinstance(obj, BaseModel):
        return obj.model_dump(by_alias=True, exclude_none=True)

    if isinstance(obj, (bytes, bytearray)):
        return encode_blob(bytes(obj))

    if isinstance(obj, memoryview):
        return encode_blob(obj.tobytes())

    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def dumps(obj: Any, indent: bool = False) -> str:
    """
    Serialize object to JSON string using orjson.

    Args:
        obj: Object to serialize
        indent: Pretty-print with two-space indentation

    Returns:
        JSON string
    """
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(obj, default=_default_handler, option=option).decode("utf-8")

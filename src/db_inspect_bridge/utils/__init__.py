"""Utility modules for the inspector bridge."""

from db_inspect_bridge.utils.serialization import dumps, encode_blob

__all__ = [
    "dumps",
    "encode_blob",
]

"""Serialization utilities."""

from dataclasses import asdict
from datetime import datetime


def serialize_dataclass(obj) -> dict:
    """Serialize a dataclass to a JSON-compatible dict, datetimes as ISO strings."""
    return _convert(asdict(obj))


def _convert(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_convert(v) for v in value]
    return value

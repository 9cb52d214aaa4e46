"""
Utility functions for endpoint operations.
"""
from typing import Any

from pydantic import BaseModel


def to_payload(data: Any) -> Any:
    """Dump pydantic models (recursively inside lists) with their camelCase aliases."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [to_payload(item) for item in data]
    return data


def success(data: Any) -> dict:
    """
    Wrap a result in the response envelope.

    Args:
        data: A pydantic model, a list of them, or plain JSON data

    Returns:
        {"success": True, "data": ...}
    """
    return {"success": True, "data": to_payload(data)}

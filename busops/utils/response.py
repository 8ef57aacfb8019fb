from typing import Any, Iterable

from pydantic import BaseModel


def success_response(data: Any = None, message: str | None = None) -> dict:
    return {"status": "success", "data": data, "message": message}


def error_response(message: str, data: Any = None) -> dict:
    return {"status": "error", "data": data, "message": message}


def dump(item: Any, schema: type[BaseModel]) -> dict:
    """Validate an ORM row or dict against ``schema`` and return JSON-ready data."""
    return schema.model_validate(item).model_dump(mode="json")


def dump_all(items: Iterable[Any], schema: type[BaseModel]) -> list[dict]:
    return [dump(item, schema) for item in items]

"""
Request validation dependencies.

Each factory returns a FastAPI dependency that parses one part of the
request (path parameters, query string or JSON body) with a pydantic model.
Declare them ahead of the auth dependency so malformed input is rejected
before identity is resolved.
"""

import json
from typing import Any, Callable, Dict, List, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from taskhub.exceptions import ValidationFailure

ModelT = TypeVar("ModelT", bound=BaseModel)


def format_errors(exc: ValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors into {field, message} pairs."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        errors.append({"field": field, "message": error["msg"]})
    return errors


def _parse(model: Type[ModelT], raw: Dict[str, Any], message: str) -> ModelT:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise ValidationFailure(message, errors=format_errors(e)) from e


def validate_params(model: Type[ModelT]) -> Callable:
    async def dependency(request: Request) -> ModelT:
        return _parse(model, dict(request.path_params), "Invalid parameters")

    return dependency


def validate_query(model: Type[ModelT]) -> Callable:
    async def dependency(request: Request) -> ModelT:
        return _parse(model, dict(request.query_params), "Invalid query parameters")

    return dependency


def validate_body(model: Type[ModelT]) -> Callable:
    async def dependency(request: Request) -> ModelT:
        raw_body = await request.body()

        if not raw_body.strip():
            payload: Any = {}
        else:
            try:
                payload = json.loads(raw_body)
            except ValueError:
                raise ValidationFailure(
                    "Validation error",
                    errors=[{"field": "body", "message": "Malformed JSON body"}]
                )

        if not isinstance(payload, dict):
            raise ValidationFailure(
                "Validation error",
                errors=[{"field": "body", "message": "Request body must be a JSON object"}]
            )

        return _parse(model, payload, "Validation error")

    return dependency

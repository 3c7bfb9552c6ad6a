"""Request validation: pydantic body schemas and tolerant query args."""

import functools
import logging
from typing import Any, Dict, Optional, Type

import pydantic
from flask import request

from core.errors import ValidationError

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def camel_case(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


def first_error_message(exc: pydantic.ValidationError) -> str:
    """Human-readable text for the first failing field."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    message = error.get('msg', "Invalid value")
    if message.startswith(_VALUE_ERROR_PREFIX):
        return message[len(_VALUE_ERROR_PREFIX):]
    if error.get('type') == 'string_pattern_mismatch':
        message = "Invalid format"
    field = ".".join(str(part) for part in error.get('loc', ()) if not isinstance(part, int))
    return f"{field}: {message}" if field else message


def parse_body(schema: Type[pydantic.BaseModel], data: Any = None,
               partial: bool = False) -> Dict[str, Any]:
    """Validate ``data`` (default: the JSON or form body) against ``schema``.

    With ``partial`` only the fields the caller actually sent are returned.
    """
    if data is None:
        data = request.get_json(silent=True)
        if data is None:
            data = request.form.to_dict() if request.form else {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid request body")
    try:
        model = schema.model_validate(data)
    except pydantic.ValidationError as e:
        message = first_error_message(e)
        logger.info(f"Rejected {request.method} {request.path}: {message}")
        raise ValidationError(message)
    return model.model_dump(exclude_unset=partial)


def validate_body(schema: Type[pydantic.BaseModel], partial: bool = False):
    """Validate the request body before the view runs; the view gets ``body``."""
    def decorator(view):
        @functools.wraps(view)
        def wrapper(*args, **kwargs):
            kwargs['body'] = parse_body(schema, partial=partial)
            return view(*args, **kwargs)
        return wrapper
    return decorator


def query_arg(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read a query parameter by its snake_case or camelCase name."""
    value = request.args.get(name)
    if value is None:
        value = request.args.get(camel_case(name))
    return value if value is not None else default


def query_args(*names: str) -> Dict[str, Optional[str]]:
    return {name: query_arg(name) for name in names}


def body_field(name: str, default: Any = None) -> Any:
    """Loose single-field read for endpoints without a schema."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return default
    if name in data:
        return data[name]
    return data.get(camel_case(name), default)


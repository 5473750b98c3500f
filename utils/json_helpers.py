"""
JSON serialization helpers for pipeflow-mcp.

Special float values (inf, nan) are not valid JSON per RFC 7159; these helpers
replace them with null and flatten pydantic models and enums before dumping.
"""

import json
import math
from enum import Enum
from typing import Any

import numpy as np
from pydantic import BaseModel


def sanitize_for_json(obj: Any) -> Any:
    """
    Recursively sanitize an object for JSON serialization.

    Replaces inf and nan float values with None, converts pydantic models to
    dicts and enums to their values. Also handles numpy scalar types.

    Examples:
        >>> sanitize_for_json({'value': float('inf')})
        {'value': None}
        >>> sanitize_for_json([1.0, float('nan'), 3.0])
        [1.0, None, 3.0]
    """
    if obj is None:
        return None

    if isinstance(obj, Enum):
        return obj.value

    if isinstance(obj, bool):
        return obj

    if isinstance(obj, (int, str)):
        return obj

    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return obj

    if isinstance(obj, BaseModel):
        return sanitize_for_json(obj.model_dump())

    if isinstance(obj, (np.integer, np.floating)):
        return sanitize_for_json(float(obj))
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())

    if isinstance(obj, dict):
        return {k: sanitize_for_json(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]

    return str(obj)


def safe_json_dumps(obj: Any, **kwargs) -> str:
    """
    Safely serialize an object to JSON string.

    Examples:
        >>> safe_json_dumps({'value': float('inf')})
        '{"value": null}'
    """
    sanitized = sanitize_for_json(obj)
    return json.dumps(sanitized, **kwargs)


def is_valid_number(value: Any) -> bool:
    """
    Check if a value is a valid finite number (not inf, nan, or CoolProp _HUGE).

    CoolProp returns _HUGE (approximately 1e308) for invalid states.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if math.isnan(value) or math.isinf(value):
        return False
    if abs(value) > 1e300:
        return False
    return True


def error_json(error: Any, **extra) -> str:
    """JSON error payload for a tool call.

    ``error`` may be a message or an exception; pipecore exceptions contribute
    their structured fields via ``to_dict()``.
    """
    if isinstance(error, BaseException) and hasattr(error, "to_dict"):
        payload = error.to_dict()
    elif isinstance(error, BaseException):
        payload = {"error": str(error), "error_type": type(error).__name__}
    else:
        payload = {"error": str(error)}
    payload.update({k: v for k, v in extra.items() if v is not None})
    return safe_json_dumps(payload)

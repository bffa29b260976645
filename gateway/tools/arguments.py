from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from gateway.errors import InvalidArgument

_TRUE = ("true", "1", "yes", "on")
_FALSE = ("false", "0", "no", "off")


def _number(name: str, value: Any) -> Any:
    if isinstance(value, bool):
        raise InvalidArgument(f"Argument '{name}' must be a number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidArgument(f"Argument '{name}' must be a finite number")
        return int(value) if value.is_integer() else value
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value.strip())
        except ValueError:
            raise InvalidArgument(f"Argument '{name}' must be a number, got {value!r}") from None
        return _number(name, parsed)
    raise InvalidArgument(f"Argument '{name}' must be a number")


def _integer(name: str, value: Any) -> int:
    n = _number(name, value)
    if not isinstance(n, int):
        raise InvalidArgument(f"Argument '{name}' must be an integer")
    return n


def _boolean(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE:
            return True
        if v in _FALSE:
            return False
    raise InvalidArgument(f"Argument '{name}' must be true or false")


def _string(name: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise InvalidArgument(f"Argument '{name}' must be a string")


def _array(name: str, value: Any, item_schema: Dict[str, Any]) -> List[Any]:
    if isinstance(value, str):
        items: List[Any] = [p.strip() for p in value.split(",") if p.strip()]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        items = [value]
    return [coerce(f"{name}[{i}]", v, item_schema) for i, v in enumerate(items)]


def coerce(name: str, value: Any, schema: Dict[str, Any]) -> Any:
    kind = schema.get("type")
    if kind == "number":
        out = _number(name, value)
    elif kind == "integer":
        out = _integer(name, value)
    elif kind == "boolean":
        out = _boolean(name, value)
    elif kind == "string":
        out = _string(name, value)
    elif kind == "array":
        out = _array(name, value, schema.get("items") or {})
    else:
        out = value
    allowed = schema.get("enum")
    if allowed is not None and out not in allowed:
        raise InvalidArgument(f"Argument '{name}' must be one of: {', '.join(map(str, allowed))}")
    return out


def validate_arguments(schema: Dict[str, Any], args: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Check ``args`` against a tool's input schema and return the cleaned copy.

    Declared fields are coerced (numeric strings, "true"/"false", comma lists),
    enums are enforced and required fields must be present. Undeclared keys are
    dropped; ``None`` counts as absent.
    """
    if args is None:
        args = {}
    if not isinstance(args, dict):
        raise InvalidArgument("Tool arguments must be an object")
    properties: Dict[str, Any] = schema.get("properties") or {}
    cleaned: Dict[str, Any] = {}
    for key, prop in properties.items():
        value = args.get(key)
        if value is None:
            continue
        cleaned[key] = coerce(key, value, prop)
    for key in schema.get("required") or []:
        value = cleaned.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidArgument(f"Missing required argument: {key}")
    return cleaned

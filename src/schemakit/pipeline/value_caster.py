import json
from typing import Any, Callable, Optional

from schemakit.standards.data_types import DataTypeCatalog

# (raw value, logical type) -> typed value
ValueCaster = Callable[[Any, Optional[str]], Any]

INTEGER_TYPES = frozenset({
    "year", "bigint", "smallint", "mediumint", "int", "integer", "long", "tinyint",
})

FLOAT_TYPES = frozenset({"float", "double", "real", "decimal", "numeric"})

_FALSE_STRINGS = {"", "0", "false"}


def _cast_integer(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        pass
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return value


def _cast_float(value: Any) -> Any:
    try:
        return float(str(value).strip())
    except ValueError:
        return value


def _cast_boolean(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _cast_json(value: Any) -> Any:
    if not isinstance(value, (str, bytes)):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


def _cast_array(value: Any) -> Any:
    if isinstance(value, str):
        return value.split(",") if value else []
    return value


def cast_value(value: Any, logical_type: Optional[str]) -> Any:
    """
    Default casting strategy.

    None stays None, and a value that cannot be coerced to the type's
    shape is returned unchanged.
    """
    if value is None:
        return None

    type_name = (logical_type or "").lower()

    if type_name in INTEGER_TYPES:
        return _cast_integer(value)

    if type_name in FLOAT_TYPES:
        return _cast_float(value)

    if DataTypeCatalog.is_boolean_type(type_name):
        return _cast_boolean(value)

    if DataTypeCatalog.is_json_type(type_name):
        return _cast_json(value)

    if DataTypeCatalog.is_array_type(type_name):
        return _cast_array(value)

    return value

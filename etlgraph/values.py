"""The dynamically-typed Value used for pin data, node config and script context.

A Value is one of: None, bool, int/float (Number), str, list of Values, or a
str-keyed dict of Values.
"""

import json
from typing import Any, Union

Value = Union[None, bool, int, float, str, list["Value"], dict[str, "Value"]]
ValueMap = dict[str, Value]


def to_value(obj: Any) -> Value:
    """Coerce an arbitrary Python object into the Value union.

    Objects outside the union (datetimes, custom classes, ...) are rendered
    with ``str()``.
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, dict):
        return {str(k): to_value(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_value(v) for v in obj]
    return str(obj)


def to_value_map(obj: dict[str, Any]) -> ValueMap:
    return {str(k): to_value(v) for k, v in obj.items()}


def render_value(value: Value) -> str:
    """Render a Value for a log line."""
    if value is None:
        return "(null)"
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)

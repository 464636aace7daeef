"""Typed access to the namespace produced by a configuration script.

Scripts are untyped, so every value the loader reads goes through
`get_typed`, which either returns a value of the requested type or raises a
`ConfigurationError` naming the option. Numbers coming from Lua may be floats
even when they hold whole values; those are accepted for integer types.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping

from .errors import MissingKeyError, TypeMismatchError


class _Mismatch(Exception):
    """Raised by coercers; turned into a TypeMismatchError by the caller."""

    def __init__(self, key_suffix: str = "", actual: Any = None):
        self.key_suffix = key_suffix
        self.actual = actual
        super().__init__(key_suffix)


def _describe(value: Any) -> str:
    return f"{type(value).__name__} {value!r}"


def _unsigned(bits: int) -> Callable[[Any], int]:
    upper = (1 << bits) - 1

    def coerce(value: Any) -> int:
        if isinstance(value, bool):
            raise _Mismatch(actual=value)
        if isinstance(value, float):
            if not value.is_integer():
                raise _Mismatch(actual=value)
            value = int(value)
        if not isinstance(value, int) or not 0 <= value <= upper:
            raise _Mismatch(actual=value)
        return value

    return coerce


def _boolean(value: Any) -> bool:
    if not isinstance(value, bool):
        raise _Mismatch(actual=value)
    return value


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise _Mismatch(actual=value)
    return value


def _mapping_of(coerce_value: Callable[[Any], Any]) -> Callable[[Any], Dict[str, Any]]:
    def coerce(value: Any) -> Dict[str, Any]:
        if not isinstance(value, Mapping):
            raise _Mismatch(actual=value)
        result: Dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise _Mismatch(f"[{key!r}]", key)
            try:
                result[key] = coerce_value(item)
            except _Mismatch:
                raise _Mismatch(f".{key}", item) from None
        return result

    return coerce


@dataclass(frozen=True)
class FieldType:
    description: str
    coerce: Callable[[Any], Any]
    optional: bool = False


U8 = FieldType("an integer from 0 to 255", _unsigned(8))
U16 = FieldType("an integer from 0 to 65535", _unsigned(16))
BOOL = FieldType("a boolean", _boolean)
STR = FieldType("a string", _string)
OPTIONAL_STR = FieldType("a string or nil", _string, optional=True)
BOOL_MAP = FieldType("a table of name = boolean entries", _mapping_of(_boolean))
U8_MAP = FieldType("a table of name = integer (0 to 255) entries", _mapping_of(_unsigned(8)))


def get_typed(namespace: Mapping[str, Any], name: str, field_type: FieldType) -> Any:
    """Read `name` from `namespace` as `field_type`.

    A missing name (or a Lua nil) is an error unless the type is optional,
    in which case None is returned.
    """
    value = namespace.get(name)
    if value is None:
        if field_type.optional:
            return None
        raise MissingKeyError(name)

    try:
        return field_type.coerce(value)
    except _Mismatch as e:
        raise TypeMismatchError(name + e.key_suffix, field_type.description, _describe(e.actual)) from None


def require_key(mapping: Mapping[str, Any], owner: str, key: str) -> Any:
    """Look up a mandatory entry of a table option such as `rate_limiter`."""
    try:
        return mapping[key]
    except KeyError:
        raise MissingKeyError(f"{owner}.{key}") from None

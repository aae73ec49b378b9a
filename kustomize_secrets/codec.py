"""Conversion between untyped resources and typed models."""

import copy
import datetime
from typing import Any, TypeVar

from mashumaro.exceptions import InvalidFieldValue, MissingField

from .api import KubeObject
from .exceptions import DecodeError, EncodeError
from .resource import Resource

__all__ = [
    "decode",
    "encode",
]

_T = TypeVar("_T", bound=KubeObject)

_SCALAR_TYPES = (str, int, float, bool, datetime.date, datetime.datetime)


def decode(resource: Resource, obj_type: type[_T]) -> _T:
    """Decode the resource as the typed model.

    The model is built from a copy of the document so the resource is never
    modified through it.
    """
    doc = copy.deepcopy(resource.doc)
    try:
        return obj_type.from_dict(doc)
    except (
        MissingField,
        InvalidFieldValue,
        AttributeError,
        TypeError,
        ValueError,
    ) as err:
        raise DecodeError(
            f"Invalid {obj_type.__name__} {resource.resource_id}: {_describe(err)}"
        ) from err


def _describe(err: BaseException) -> str:
    """Return the innermost cause of a nested field error with its field path."""
    path: list[str] = []
    while isinstance(err, InvalidFieldValue) and err.__context__ is not None:
        path.append(err.field_name)
        err = err.__context__
    if not path:
        return str(err)
    return f"at '{'.'.join(path)}': {err}"


def encode(obj: KubeObject, original: dict[str, Any] | None = None) -> dict[str, Any]:
    """Encode the typed model as a document.

    When the original document is given, keys are emitted in its order and
    keys added by the model follow them.
    """
    try:
        doc = obj.to_dict()
    except (TypeError, ValueError) as err:
        raise EncodeError(f"Unable to encode {type(obj).__name__}: {err}") from err
    _check_representable(doc, "", set())
    if original is not None:
        doc = _restore_order(doc, original)
    return doc


def _check_representable(value: Any, path: str, parents: set[int]) -> None:
    """Raise EncodeError for cycles or values that can't be serialized."""
    if value is None or isinstance(value, _SCALAR_TYPES):
        return
    if not isinstance(value, (dict, list)):
        raise EncodeError(
            f"Unable to encode value of type {type(value).__name__} at '{path}'"
        )
    if id(value) in parents:
        raise EncodeError(f"Unable to encode cyclic value at '{path}'")
    parents.add(id(value))
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise EncodeError(
                    f"Unable to encode non-string key {key!r} at '{path}'"
                )
            _check_representable(item, f"{path}.{key}" if path else key, parents)
    else:
        for index, item in enumerate(value):
            _check_representable(item, f"{path}[{index}]", parents)
    parents.remove(id(value))


def _restore_order(value: Any, original: Any) -> Any:
    """Reorder mapping keys in value to follow the original document."""
    if isinstance(value, dict) and isinstance(original, dict):
        ordered = {
            key: _restore_order(value[key], original[key])
            for key in original
            if key in value
        }
        for key, item in value.items():
            if key not in ordered:
                ordered[key] = item
        return ordered
    if isinstance(value, list) and isinstance(original, list):
        return [
            _restore_order(item, original_item)
            for item, original_item in zip(value, original)
        ] + value[len(original) :]
    return value

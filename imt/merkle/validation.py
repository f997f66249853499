"""
Parameter guards shared by the tree entry points.

Every guard raises before the caller touches any tree state.
"""
from __future__ import annotations

from typing import Any

from imt.schemas.errors import ParameterError, RangeError


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_node(value: Any) -> bool:
    """Return True if ``value`` can be stored in a tree."""
    return _is_integer(value) or isinstance(value, str)


def require_defined(value: Any, name: str) -> None:
    if value is None:
        raise ParameterError(f"Parameter '{name}' is not defined", parameter=name)


def require_node(value: Any, name: str) -> None:
    require_defined(value, name)
    if not is_node(value):
        raise ParameterError(
            f"Parameter '{name}' is none of these types: int, str",
            parameter=name,
            details={"type": type(value).__name__},
        )


def require_integer(value: Any, name: str, minimum: int | None = None) -> None:
    require_defined(value, name)
    if not _is_integer(value):
        raise ParameterError(
            f"Parameter '{name}' is not an integer",
            parameter=name,
            details={"type": type(value).__name__},
        )
    if minimum is not None and value < minimum:
        raise ParameterError(
            f"Parameter '{name}' must be at least {minimum}, got {value}",
            parameter=name,
        )


def require_function(value: Any, name: str) -> None:
    require_defined(value, name)
    if not callable(value):
        raise ParameterError(f"Parameter '{name}' is not a function", parameter=name)


def require_string(value: Any, name: str) -> None:
    require_defined(value, name)
    if not isinstance(value, str):
        raise ParameterError(f"Parameter '{name}' is not a string", parameter=name)


def require_sequence(value: Any, name: str, nodes: bool = False) -> None:
    """
    Reject anything that is not a list or tuple.

    With ``nodes=True`` every element must also be a node value.
    """
    require_defined(value, name)
    if not isinstance(value, (list, tuple)):
        raise ParameterError(
            f"Parameter '{name}' is not an array",
            parameter=name,
            details={"type": type(value).__name__},
        )
    if nodes:
        for i, item in enumerate(value):
            require_node(item, f"{name}[{i}]")


def require_index(index: Any, size: int, name: str = "index") -> None:
    """Raise RangeError unless ``0 <= index < size``."""
    require_integer(index, name)
    if index < 0 or index >= size:
        raise RangeError(
            f"The leaf at index '{index}' does not exist in this tree",
            index=index,
            size=size,
        )

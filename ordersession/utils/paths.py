"""
Dotted-path access into records and sub-resources.

Paths address model attributes by name and list entries by index, e.g.
"education.0.start_date".
"""

from typing import Any

from pydantic import BaseModel


def split_path(path: str) -> list[str]:
    return path.split(".") if path else []


def parent_path(path: str) -> str:
    """Path with its last segment removed ("" for single-segment paths)."""
    return path.rpartition(".")[0]


def leaf_name(path: str) -> str:
    return path.rpartition(".")[2]


def _step(node: Any, segment: str) -> Any:
    if isinstance(node, list):
        return node[int(segment)]
    if isinstance(node, dict):
        return node[segment]
    if isinstance(node, BaseModel):
        if segment not in type(node).model_fields:
            raise KeyError(segment)
        return getattr(node, segment)
    raise KeyError(segment)


def get_path(root: Any, path: str) -> Any:
    """
    Resolve path against root.

    Raises:
        KeyError: If a segment does not exist
    """
    node = root
    for segment in split_path(path):
        try:
            node = _step(node, segment)
        except (IndexError, ValueError, KeyError):
            raise KeyError(f"Path '{path}' does not exist (failed at '{segment}')") from None
    return node


def _check_slot(path: str, current: Any, value: Any) -> None:
    if isinstance(current, BaseModel) and not isinstance(value, type(current)):
        raise TypeError(f"Path '{path}' holds a {type(current).__name__}, got {type(value).__name__}")


def set_path(root: Any, path: str, value: Any) -> None:
    """
    Assign value at path, which must name an existing field, list index or
    mapping key. Model fields are validated on assignment; list and mapping
    slots holding a model only accept an instance of that model.

    Raises:
        KeyError: If the parent or the field does not exist
        TypeError: If value does not fit a list or mapping slot
        pydantic.ValidationError: If value does not fit a model field
    """
    parent = get_path(root, parent_path(path))
    name = leaf_name(path)

    if isinstance(parent, list):
        try:
            index = int(name)
            current = parent[index]
        except (IndexError, ValueError):
            raise KeyError(f"Path '{path}' does not exist") from None
        _check_slot(path, current, value)
        parent[index] = value
    elif isinstance(parent, dict):
        if name not in parent:
            raise KeyError(f"Path '{path}' does not exist")
        _check_slot(path, parent[name], value)
        parent[name] = value
    elif isinstance(parent, BaseModel) and name in type(parent).model_fields:
        setattr(parent, name, value)
    else:
        raise KeyError(f"Path '{path}' does not exist")

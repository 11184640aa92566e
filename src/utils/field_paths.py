"""Dotted field-path helpers for nested registration records."""
from typing import Any, Dict, Iterable, List, Optional, Union

PathPart = Union[str, int]


def split_path(path: str) -> List[PathPart]:
    """
    Split a dotted path into keys and list indices.

    Args:
        path: Path such as "teamMembers.0.emergencyContacts.1.phone"

    Returns:
        List of parts, digits converted to int
        - "teamMembers.0.name" → ["teamMembers", 0, "name"]
    """
    if not path:
        return []
    return [int(part) if part.isdigit() else part for part in path.split(".")]


def join_path(*parts: PathPart) -> str:
    """Join keys and indices into a dotted path, skipping empty parts."""
    return ".".join(str(part) for part in parts if part != "")


def get_value(values: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Read the value at a dotted path.

    Returns default when any segment is missing or out of range.
    """
    current: Any = values
    for part in split_path(path):
        if isinstance(part, int):
            if not isinstance(current, list) or part >= len(current):
                return default
            current = current[part]
        else:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
    return current


def set_value(values: Dict[str, Any], path: str, value: Any) -> None:
    """
    Write a value at a dotted path, creating intermediate dicts as needed.

    Raises:
        KeyError: If a list index in the path is out of range
    """
    parts = split_path(path)
    if not parts:
        raise KeyError("Empty field path")

    current: Any = values
    for part, next_part in zip(parts, parts[1:]):
        if isinstance(part, int):
            if not isinstance(current, list) or part >= len(current):
                raise KeyError(f"Index {part} out of range in path: {path}")
            current = current[part]
        else:
            if part not in current or current[part] is None:
                current[part] = [] if isinstance(next_part, int) else {}
            current = current[part]

    last = parts[-1]
    if isinstance(last, int):
        if not isinstance(current, list) or last >= len(current):
            raise KeyError(f"Index {last} out of range in path: {path}")
    current[last] = value


def in_scope(path: str, prefixes: Optional[Iterable[str]]) -> bool:
    """
    Check whether a path falls under any of the given prefixes.

    Args:
        path: Field path being considered
        prefixes: Path prefixes; None means everything is in scope

    Returns:
        True if path equals a prefix or lives underneath one
    """
    if prefixes is None:
        return True
    for prefix in prefixes:
        if path == prefix or path.startswith(prefix + "."):
            return True
    return False

"""Key-path helpers for nested JSON-compatible values.

A path is an ordered list of keys. Dictionaries are indexed by string key,
lists by decimal index. The empty path addresses the root value.

Example:
    value = {"user": {"tags": ["a", "b"]}}

    path = parse_path("user.tags.1", ".")  # ["user", "tags", "1"]
    get_by_path(value, path)                # "b"
    set_by_path(value, path, "c")
    test_path(value, ["user", "name"])      # True (resolves to MISSING)
    test_path(value, ["user", "tags", "0", "x"])  # False
"""

from typing import Any, Iterable, List, Optional, Sequence, Set, Union

from .exceptions import CircularReferenceError, InvalidPathError


class _Missing:
    """Sentinel for an absent value (a key that is not present)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_Missing, ())


MISSING = _Missing()

Path = List[Any]
Selector = Union[None, str, Sequence[Any]]


def parse_path(selector: Selector, separator: str = ".") -> Path:
    """Turn a selector into a list of keys.

    Args:
        selector: A pre-split sequence of keys, a separator-joined string,
            or None/"" for the root
        separator: String used to split string selectors

    Returns:
        List of keys (empty for the root)
    """
    if selector is None:
        return []
    if isinstance(selector, str):
        return selector.split(separator) if selector else []
    return list(selector)


def join_path(path: Iterable[Any], separator: str = ".") -> str:
    """Render a key-path for messages."""
    return separator.join(str(key) for key in path) or "(root)"


def is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def _list_index(key: Any) -> Optional[int]:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if isinstance(key, str) and key.isdigit():
        return int(key)
    return None


def _child(container: Any, key: Any) -> Any:
    if isinstance(container, dict):
        return container.get(str(key), MISSING)
    index = _list_index(key)
    if index is None or index >= len(container):
        return MISSING
    return container[index]


def _walk_to_parent(root: Any, path: Path) -> Any:
    if not path:
        raise InvalidPathError(path)
    current = root
    for key in path[:-1]:
        if not is_container(current):
            raise InvalidPathError(path, key)
        current = _child(current, key)
    if not is_container(current):
        raise InvalidPathError(path, path[-1])
    return current


def get_by_path(root: Any, path: Path) -> Any:
    """Get the value at a path.

    Absent dictionary keys and out-of-range list indices read as MISSING.

    Raises:
        InvalidPathError: If an intermediate value is not a dict or list
    """
    current = root
    for key in path:
        if not is_container(current):
            raise InvalidPathError(path, key)
        current = _child(current, key)
    return current


def set_by_path(root: Any, path: Path, value: Any) -> None:
    """Assign a value at a non-empty path.

    Assigning MISSING to a dictionary key removes the key. A list index equal
    to the list's length appends.

    Raises:
        InvalidPathError: If the path is empty, walks through a non-container,
            or uses an unusable list index
    """
    parent = _walk_to_parent(root, path)
    key = path[-1]
    if isinstance(parent, dict):
        if value is MISSING:
            parent.pop(str(key), None)
        else:
            parent[str(key)] = value
        return

    index = _list_index(key)
    if index is None or index > len(parent):
        raise InvalidPathError(path, key)
    if value is MISSING:
        value = None
    if index == len(parent):
        parent.append(value)
    else:
        parent[index] = value


def delete_by_path(root: Any, path: Path) -> None:
    """Remove the final key of a path from its parent.

    Raises:
        InvalidPathError: If the path is empty or walks through a non-container
    """
    parent = _walk_to_parent(root, path)
    key = path[-1]
    if isinstance(parent, dict):
        parent.pop(str(key), None)
        return
    index = _list_index(key)
    if index is not None and index < len(parent):
        del parent[index]


def test_path(root: Any, path: Path) -> bool:
    """Check that a path resolves without indexing into a non-container.

    The final key itself need not exist. Never raises.
    """
    current = root
    for key in path:
        if not is_container(current):
            return False
        current = _child(current, key)
    return True


# Not a pytest test function
test_path.__test__ = False


def clone(value: Any) -> Any:
    """Deep-copy a graph of dicts and lists.

    Tuples are copied as lists and callables are dropped. The set of visited
    objects lives only for this call.

    Raises:
        CircularReferenceError: If the same dict or list is met twice
    """
    return _clone(value, set(), [])


def _clone(value: Any, seen: Set[int], path: Path) -> Any:
    if not isinstance(value, (dict, list, tuple)):
        return value

    marker = id(value)
    if marker in seen:
        raise CircularReferenceError(path)
    seen.add(marker)

    if isinstance(value, dict):
        return {
            key: _clone(item, seen, path + [key])
            for key, item in value.items()
            if not callable(item)
        }
    return [
        _clone(item, seen, path + [index])
        for index, item in enumerate(value)
        if not callable(item)
    ]

"""Sort keys for sidebar buffer lists."""

from typing import Any, Callable, Dict, Iterable, List, Sequence

from ..errors import PurposeConfigError
from ..purposes.models import SortKey


def _by_name(buffer: Any) -> Any:
    return buffer.name


def _by_modified(buffer: Any) -> Any:
    return not buffer.modified


def _by_recency(buffer: Any) -> Any:
    if buffer.last_display_time is None:
        return (1, 0.0)
    return (0, -buffer.last_display_time.timestamp())


def _by_mode(buffer: Any) -> Any:
    return buffer.major_mode or ""


def _by_filename(buffer: Any) -> Any:
    return (buffer.file_name is None, buffer.file_name or "")


SORT_KEYS: Dict[str, Callable[[Any], Any]] = {
    "name": _by_name,
    "modified": _by_modified,
    "recency": _by_recency,
    "mode": _by_mode,
    "filename": _by_filename,
}

DEFAULT_SORT: List[str] = ["modified", "name"]


def resolve_sort_key(key: SortKey) -> Callable[[Any], Any]:
    """Turn a sort key name or callable into a key function.

    Raises:
        PurposeConfigError: If the name is not a known sort key
    """
    if callable(key):
        return key
    try:
        return SORT_KEYS[key]
    except KeyError:
        raise PurposeConfigError(
            f"Unknown sort key {key!r}; expected one of {', '.join(sorted(SORT_KEYS))}"
        ) from None


def sort_buffers(buffers: Iterable[Any], sort: Sequence[SortKey] = DEFAULT_SORT) -> List[Any]:
    """Sort buffers by several keys, the first being the primary key.

    Sorting is stable, so buffers equal under every key keep their input order.
    """
    key_fns = [resolve_sort_key(key) for key in sort]
    result = list(buffers)
    for key_fn in reversed(key_fns):
        result.sort(key=key_fn)
    return result

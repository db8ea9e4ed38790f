"""In-memory multi-map building used by every join in the roster assembly."""

from typing import Callable, Dict, Hashable, Iterable, List, Optional, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def group_by(rows: Iterable[T], key: Callable[[T], Optional[K]]) -> Dict[K, List[T]]:
    """
    Group rows by ``key(row)``.

    Keys keep first-seen order and each list keeps input order. A row whose
    key is ``None`` belongs to no group and is dropped. Composite keys are
    dropped when any part is ``None``.
    """
    grouped: Dict[K, List[T]] = {}
    for row in rows:
        k = key(row)
        if k is None:
            continue
        if isinstance(k, tuple) and any(part is None for part in k):
            continue
        grouped.setdefault(k, []).append(row)
    return grouped

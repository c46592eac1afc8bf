from typing import Iterable, List, Optional, Sequence


def contains(items: Optional[Iterable[int]], value: int) -> bool:
    """Check for value in items, None is treated as an empty list."""
    if items is None:
        return False
    return any(item == value for item in items)


def get_diff(a: Iterable[int], b: Sequence[int]) -> List[int]:
    """Return items from b that are NOT in a, in b's order."""
    seen = set(a or ())
    return [item for item in (b or ()) if item not in seen]

from typing import Iterator, List, Set


class MountedSet:
    """
    Identifiers (and auxiliary paths) that are mounted or being mounted.

    Append-only for the life of the process. `claim` is the only way in and
    is an insert-if-absent with no await in between, so two coroutines asking
    for the same key on one event loop can never both win.
    """

    def __init__(self) -> None:
        self._keys: Set[str] = set()

    def claim(self, key: str) -> bool:
        """Add `key` and return True, or return False if it was already there."""
        if key in self._keys:
            return False
        self._keys.add(key)
        return True

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def snapshot(self) -> List[str]:
        return sorted(self._keys)

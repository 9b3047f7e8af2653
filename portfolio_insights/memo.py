from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Callable, Hashable, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DerivationMemo:
    """Bounded LRU of derived datasets keyed on (name, input snapshot).

    Inputs are tuples of frozen records, so two snapshots with the same
    contents share an entry and any change to a record forces a recompute.
    """

    def __init__(self, maxsize: int = 128) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0
        self._entries: "OrderedDict[Tuple[str, Hashable], Any]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_compute(self, name: str, snapshot: Hashable, compute: Callable[[], T]) -> T:
        key = (name, snapshot)
        if key in self._entries:
            self.hits += 1
            self._entries.move_to_end(key)
            return self._entries[key]

        self.misses += 1
        logger.debug("Recomputing %s over %s records", name, _size(snapshot))
        value = compute()
        self._entries[key] = value
        if len(self._entries) > self.maxsize:
            self._entries.popitem(last=False)
        return value

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0


def _size(snapshot: Hashable) -> Any:
    try:
        return len(snapshot)  # type: ignore[arg-type]
    except TypeError:
        return "?"

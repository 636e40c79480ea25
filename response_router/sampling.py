"""Injectable phrase selection.

Every place that chooses among equivalent phrasings goes through a
:class:`Picker`, so tests can pin the choice and servers can give each
conversation its own generator.
"""

from __future__ import annotations

import random
import threading
from typing import Optional, Protocol, Sequence, TypeVar

from . import config

T = TypeVar("T")


class Picker(Protocol):
    def pick(self, items: Sequence[T]) -> T: ...


class RandomPicker:
    """Uniform choice from a private, lock-guarded ``random.Random``."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("cannot pick from an empty sequence")
        with self._lock:
            return self._rng.choice(items)


class FirstPicker:
    """Always the first item."""

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("cannot pick from an empty sequence")
        return items[0]


def default_picker() -> RandomPicker:
    return RandomPicker(config.RANDOM_SEED)

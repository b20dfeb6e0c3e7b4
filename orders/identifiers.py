"""Identifier generation for new purchase orders."""
import uuid
from typing import Callable, Iterable, Iterator

IdGenerator = Callable[[], str]


def uuid4_generator() -> str:
    """Default generator: a random RFC 4122 version 4 UUID string."""
    return str(uuid.uuid4())


class SequenceIdGenerator:
    """
    Deterministic generator that hands out ids from an iterable, or
    ``<prefix>-1``, ``<prefix>-2``, ... when none is given.
    """

    def __init__(self, ids: Iterable[str] | None = None, prefix: str = "po") -> None:
        self._ids: Iterator[str] = iter(ids) if ids is not None else self._counter(prefix)

    @staticmethod
    def _counter(prefix: str) -> Iterator[str]:
        n = 0
        while True:
            n += 1
            yield f"{prefix}-{n}"

    def __call__(self) -> str:
        return next(self._ids)

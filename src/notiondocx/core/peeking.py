"""Iterator with one element of non-consuming lookahead"""

from typing import Generic, Iterable, Optional, TypeVar


T = TypeVar("T")

_EXHAUSTED = object()


class PeekingIterator(Generic[T]):
    """Wrap any iterable; peek() shows the head without advancing.

    Single consumer only. The underlying iterator is always read one element
    ahead of the caller.
    """

    def __init__(self, iterable: Iterable[T]):
        self._it = iter(iterable)
        self._head = next(self._it, _EXHAUSTED)

    def peek(self) -> tuple[Optional[T], bool]:
        """Return (head, done). done is True, with head None, once exhausted."""
        if self._head is _EXHAUSTED:
            return None, True
        return self._head, False

    @property
    def done(self) -> bool:
        return self._head is _EXHAUSTED

    def __iter__(self):
        return self

    def __next__(self) -> T:
        if self._head is _EXHAUSTED:
            raise StopIteration
        current = self._head
        self._head = next(self._it, _EXHAUSTED)
        return current

    next = __next__

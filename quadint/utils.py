from dataclasses import dataclass, field
from functools import wraps
from math import isqrt
from threading import Lock
from typing import Any, Callable, Generator, Generic, Hashable, Iterator, Optional, TypeVar

from quadint.exceptions import ArithmeticOverflowError

T = TypeVar("T")

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


def in_int_range(value: int) -> bool:
    """True iff value fits in a signed 32-bit integer."""
    return INT_MIN <= value <= INT_MAX


def check_int_range(value: int, what: str = "value") -> int:
    """
    Range-check an intermediate result against the signed 32-bit type.

    Args:
        value: The exact (unbounded) intermediate value.
        what: Short description used in the error message.

    Returns:
        int: value, unchanged.

    Raises:
        ArithmeticOverflowError: If value does not fit.
    """
    if not in_int_range(value):
        raise ArithmeticOverflowError(f"{what} {value} exceeds the range of a signed 32-bit integer", value)

    return value


def is_squarefree(n: int) -> bool:
    """True iff no square greater than 1 divides n. 0 is not squarefree."""
    n = int(n)
    if n in (-1, 1):
        return True
    if n == 0:
        return False
    if n % 4 == 0:
        return False

    m = abs(n)
    for root in range(3, isqrt(m) + 1, 2):
        if m % (root * root) == 0:
            return False

    return True


@dataclass
class _Replay(Generic[T]):
    items: list[T] = field(default_factory=list)
    gen: Optional[Iterator[T]] = None
    lock: Lock = field(default_factory=Lock)


def cache_generator(
    fn: Callable[..., Generator[T, None, None]],
) -> Callable[..., Iterator[T]]:
    """
    Memoize a generator function, keyed on its (hashable) positional arguments.

    The first call for a key starts the underlying generator; every call returns a
    fresh iterator that replays what has been produced so far and then advances the
    shared generator on demand. Callers that stop early (as trial division does once
    the remaining norm is small) never force the rest of the sequence.

    Returns:
        Callable: The wrapped function.
    """
    entries: dict[Hashable, _Replay[T]] = {}
    entries_lock = Lock()

    @wraps(fn)
    def wrapper(*args: Any) -> Iterator[T]:
        with entries_lock:
            entry = entries.get(args)
            if entry is None:
                entry = _Replay(gen=fn(*args))
                entries[args] = entry

        def _iter() -> Iterator[T]:
            i = 0
            while True:
                with entry.lock:
                    if i < len(entry.items):
                        item = entry.items[i]
                    elif entry.gen is None:
                        return
                    else:
                        try:
                            item = next(entry.gen)
                        except StopIteration:
                            entry.gen = None
                            return
                        entry.items.append(item)
                i += 1
                yield item

        return _iter()

    return wrapper

"""Concurrent fan-out that keeps successes and hands back failures"""

from typing import Awaitable, Callable, Generic, List, Sequence, Tuple, TypeVar
import asyncio

K = TypeVar("K")
T = TypeVar("T")


class Settled(Generic[K, T]):
    """Outcomes of a fan-out, partitioned and kept in input order"""

    def __init__(self):
        self.successes: List[Tuple[K, T]] = []
        self.failures: List[Tuple[K, Exception]] = []

    @property
    def values(self) -> List[T]:
        return [value for _, value in self.successes]


async def gather_settled(
    keys: Sequence[K],
    func: Callable[[K], Awaitable[T]],
) -> Settled[K, T]:
    """
    Run func(key) for every key concurrently and wait for all of them.

    Exceptions do not cancel sibling calls; each one is recorded against
    its key in `failures`.
    """
    results = await asyncio.gather(*(func(key) for key in keys), return_exceptions=True)

    settled: Settled[K, T] = Settled()
    for key, result in zip(keys, results):
        if isinstance(result, Exception):
            settled.failures.append((key, result))
        elif isinstance(result, BaseException):
            raise result
        else:
            settled.successes.append((key, result))

    return settled

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Mapping, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    message: str


Outcome = Union[Success[Any], Failure]


def _message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


async def run_independent(operations: Mapping[str, Callable[[], Awaitable[T]]]) -> Dict[str, Outcome]:
    """Run every operation concurrently and wait for all of them to settle.

    One failing operation never cancels or hides the others. The returned dict
    keeps the key order of ``operations``, not completion order.
    """
    keys = list(operations.keys())
    results = await asyncio.gather(*(operations[k]() for k in keys), return_exceptions=True)
    out: Dict[str, Outcome] = {}
    for key, res in zip(keys, results):
        if isinstance(res, Exception):
            out[key] = Failure(_message(res))
        elif isinstance(res, BaseException):
            raise res
        else:
            out[key] = Success(res)
    return out

"""Subscription record and the tagged outcome of invoking its callback."""

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

Callback = Callable[[Any], Union[None, bool, Awaitable[Optional[bool]]]]


@dataclass(frozen=True)
class Immediate:
    """Synchronous result; unsubscribe is True only when the callback returned True."""

    unsubscribe: bool


@dataclass(frozen=True)
class Deferred:
    """Result that settles later; awaiting it yields the unsubscribe signal."""

    awaitable: Awaitable[Optional[bool]]

    async def settle(self) -> bool:
        return (await self.awaitable) is True

    def discard(self) -> None:
        """Close a coroutine that will never be awaited (delivery was aborted)."""
        if inspect.iscoroutine(self.awaitable):
            self.awaitable.close()


Outcome = Union[Immediate, Deferred]


def _declares_async(callback: Callback) -> bool:
    if inspect.iscoroutinefunction(callback):
        return True
    call = getattr(callback, "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)


class Subscription:
    """A registered callback under its registry-issued id."""

    def __init__(self, subscription_id: int, callback: Callback) -> None:
        self._id = subscription_id
        self._callback = callback
        self._is_async = _declares_async(callback)

    @property
    def subscription_id(self) -> int:
        return self._id

    @property
    def callback(self) -> Callback:
        return self._callback

    @property
    def is_async(self) -> bool:
        """True when the callback is declared `async def`."""
        return self._is_async

    def invoke(self, message: Any) -> Outcome:
        """
        Call the callback with message and classify what it returned.
        Exceptions raised by the callback propagate to the caller untouched.
        """
        result = self._callback(message)
        if self._is_async or inspect.isawaitable(result):
            return Deferred(result)
        return Immediate(result is True)

    def __repr__(self) -> str:
        name = getattr(self._callback, "__qualname__", type(self._callback).__name__)
        return f"{self.__class__.__name__}(id={self._id!r}, callback={name!r})"

"""Combinators: rules that collapse two adjacent same-topic messages into one."""

from typing import Any, Callable, Hashable, Optional, Protocol, TypeVar, Union

M = TypeVar("M")

CombineFn = Callable[[Any, Any], Optional[Any]]


class MessageCombinator(Protocol[M]):
    """combine(older, newer) returns the replacement message, or None to keep both."""

    def combine(self, older: M, newer: M) -> Optional[M]:
        ...


class FunctionCombinator:
    """Adapts a plain two-argument function to the MessageCombinator protocol."""

    def __init__(self, fn: CombineFn) -> None:
        self._fn = fn

    def combine(self, older: Any, newer: Any) -> Optional[Any]:
        return self._fn(older, newer)

    def __repr__(self) -> str:
        return f"FunctionCombinator({getattr(self._fn, '__name__', self._fn)!r})"


def as_combinator(
    combinator: Union["MessageCombinator[Any]", CombineFn, None],
) -> Optional["MessageCombinator[Any]"]:
    """Return a combinator object for either a combinator or a bare function (None passes through)."""
    if combinator is None:
        return None
    if hasattr(combinator, "combine"):
        return combinator  # type: ignore[return-value]
    if callable(combinator):
        return FunctionCombinator(combinator)
    raise TypeError(
        f"combinator must be callable or define combine(), got {type(combinator).__name__}"
    )


class _KeyedCombinator:
    def __init__(self, key: Optional[Callable[[Any], Hashable]] = None) -> None:
        self._key = key

    def _matches(self, older: Any, newer: Any) -> bool:
        if self._key is None:
            return True
        return self._key(older) == self._key(newer)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self._key!r})"


class KeepNewest(_KeyedCombinator):
    """Collapse adjacent messages into the newer one (optionally only when key() agrees)."""

    def combine(self, older: Any, newer: Any) -> Optional[Any]:
        return newer if self._matches(older, newer) else None


class KeepOldest(_KeyedCombinator):
    """Collapse adjacent messages into the older one (optionally only when key() agrees)."""

    def combine(self, older: Any, newer: Any) -> Optional[Any]:
        return older if self._matches(older, newer) else None

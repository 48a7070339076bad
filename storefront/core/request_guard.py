"""Generation counter that discards responses for views that moved on.

Each view (product list, product detail, confirmation) owns a guard. Starting
a request takes a token; navigating away or starting a newer request makes
older tokens stale, and their results are dropped instead of applied.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, TypeVar

from storefront.logging_config import logger

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RequestToken:
    name: str
    generation: int


class RequestGuard:
    def __init__(self, name: str = "view") -> None:
        self.name = name
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> RequestToken:
        """Start a new request; every earlier token becomes stale."""
        self._generation += 1
        return RequestToken(self.name, self._generation)

    def invalidate(self) -> None:
        """Mark all in-flight requests stale, e.g. when the view is torn down."""
        self._generation += 1

    def is_current(self, token: RequestToken) -> bool:
        return token.name == self.name and token.generation == self._generation

    async def run(self, awaitable: Awaitable[T]) -> tuple[bool, T | None]:
        """Await under a fresh token; ``(False, None)`` if it went stale meanwhile."""
        token = self.begin()
        try:
            result: Any = await awaitable
        except Exception:
            if self.is_current(token):
                raise
            logger.debug("Dropping error from stale %s request", self.name)
            return False, None
        if not self.is_current(token):
            logger.debug(
                "Discarding stale %s response (generation %s, current %s)",
                self.name,
                token.generation,
                self._generation,
            )
            return False, None
        return True, result

"""Async loading state with generation-based staleness rejection.

Message consumption is single-threaded, so correctness rests on one rule: a
ContentLoaded whose (tag, generation) does not match the consumer's current
state is dropped without touching that state.
"""

from __future__ import annotations

import itertools
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

import structlog

from cwtui.cli.tui.messages import ContentLoaded
from cwtui.cli.tui.tasks import CancelToken, Task, background

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_serials = itertools.count(1)


def unique_tag(prefix: str) -> str:
    """Tag no other loading context in this process shares."""
    return f"{prefix}#{next(_serials)}"


class LoadState(str, Enum):
    """Lifecycle of a loading context."""

    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class GenerationTracker:
    """Generation counter plus the cancellation handle of the in-flight load."""

    def __init__(self) -> None:
        self.generation = 0
        self.token: CancelToken | None = None

    def begin(self) -> tuple[int, CancelToken]:
        """Start a load at the current generation."""
        self.cancel()
        self.token = CancelToken()
        return self.generation, self.token

    def advance(self) -> tuple[int, CancelToken]:
        """Move to a new loading context; cancels whatever was in flight."""
        self.cancel()
        self.generation += 1
        self.token = CancelToken()
        return self.generation, self.token

    def cancel(self) -> None:
        if self.token is not None:
            self.token.cancel()
            self.token = None

    def is_current(self, generation: int) -> bool:
        return generation == self.generation


def load_task(
    tag: str,
    generation: int,
    fn: Callable[[], Any],
    token: CancelToken | None = None,
) -> Task:
    """Wrap `fn` so it yields exactly one ContentLoaded for (tag, generation).

    Exceptions raised by `fn` become the message's error. A load whose token was
    cancelled still reports, tagged with its own generation, and is dropped by the
    consumer.
    """

    def run() -> ContentLoaded:
        try:
            payload = fn()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            if token is not None and token.cancelled:
                logger.debug("Load %s gen=%d cancelled", tag, generation)
                return ContentLoaded(generation=generation, tag=tag, error="cancelled")
            logger.warning("Load %s gen=%d failed: %s", tag, generation, exc)
            return ContentLoaded(generation=generation, tag=tag, error=str(exc) or type(exc).__name__)
        return ContentLoaded(generation=generation, tag=tag, payload=payload)

    return background(run, name=f"load:{tag}")


class OneShotLoader(Generic[T]):
    """Single load started at initialization: loading -> ready | error."""

    def __init__(self, tag: str, load: Callable[[], T]) -> None:
        self.tag = unique_tag(tag)
        self._load = load
        self._tracker = GenerationTracker()
        self.state = LoadState.LOADING
        self.content: T | None = None
        self.error: str | None = None

    @property
    def loading(self) -> bool:
        return self.state is LoadState.LOADING

    def start(self) -> Task:
        self.state = LoadState.LOADING
        self.error = None
        generation, token = self._tracker.advance()
        return load_task(self.tag, generation, self._load, token)

    def cancel(self) -> None:
        self._tracker.cancel()

    def accept(self, msg: ContentLoaded) -> bool:
        """Apply a result if it belongs to the current load; returns whether it did."""
        if msg.tag != self.tag or not self._tracker.is_current(msg.generation):
            logger.debug("Dropping stale %s gen=%d (current %d)", msg.tag, msg.generation, self._tracker.generation)
            return False
        if msg.error is not None:
            self.state = LoadState.ERROR
            self.error = msg.error
        else:
            self.state = LoadState.READY
            self.content = msg.payload
            self.error = None
        return True

"""
Mutation notifications from the editor to its host.

The editor does not know how re-rendering works. After each handler has
finished writing to the value tree it emits a MutationEvent; the host owns
the subscriber list and decides when to recompute the view.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Tuple
import logging

logger = logging.getLogger(__name__)


class MutationType:
    """Mutation type constants."""
    SET = "set"
    DELETE = "delete"
    ADD = "add"


@dataclass(frozen=True)
class MutationEvent:
    """A completed write to the value tree."""
    mutation: str
    namespace: str
    path: Tuple[Any, ...] = field(default_factory=tuple)


Subscriber = Callable[[MutationEvent], None]


class MutationChannel:
    """Synchronous publish/subscribe channel for mutation events."""

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a subscriber.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def emit(self, event: MutationEvent) -> None:
        """Deliver event to every subscriber in registration order."""
        logger.debug(f"Mutation {event.mutation} at {event.namespace} -> {len(self._subscribers)} subscribers")
        for callback in list(self._subscribers):
            callback(event)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

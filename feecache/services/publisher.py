"""Publish/subscribe channel for fee snapshot updates."""

import logging
from typing import Callable

from feecache.models.fees import FeeSnapshot

logger = logging.getLogger(__name__)

FeeObserver = Callable[[FeeSnapshot], None]


class FeeUpdatePublisher:
    """Pushes versioned fee snapshots to registered observers."""

    def __init__(self) -> None:
        self._observers: list[FeeObserver] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._observers)

    def subscribe(self, observer: FeeObserver) -> Callable[[], None]:
        """
        Register an observer for fee updates.

        Args:
            observer: Callable receiving each new FeeSnapshot.

        Returns:
            A callable that removes the observer again.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def publish(self, snapshot: FeeSnapshot) -> None:
        """Deliver a snapshot to every observer, isolating observer failures."""
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception as e:
                logger.error(
                    f"[FeePublisher] Observer {observer!r} failed for version {snapshot.version}: {e}",
                    exc_info=True,
                )

"""
vouchgraph/engine/notifier.py - Change Notifier.

Observers subscribe plain callables and receive immutable event objects
after each successful add_edge / remove_edge. Notifications are a pure side
channel: nothing an observer does (or raises) feeds back into engine state.

Per-operation event order:
    1. NodeActivated            - source, then target, on first-ever edge touch
    2. RankChanged              - destination's effective rank moved
    3. VouchCreated | BootstrapVouchCreated | VouchRemoved
    4. BootstrapCompleted       - once, after the final seeded vouch
"""

import logging
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, Type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeActivated:
    """First edge ever touching identity."""

    identity: Hashable


@dataclass(frozen=True)
class RankChanged:
    """Effective rank of identity moved from old_rank to new_rank."""

    identity: Hashable
    old_rank: int
    new_rank: int


@dataclass(frozen=True)
class VouchCreated:
    """
    A vouch created through the normal Rank / Score path.

    Fields:
        source:       Voucher.
        target:       Vouchee.
        target_rank:  Effective rank of target after the operation.
        source_score: Score of source after the operation.
        target_score: Score of target after the operation.
    """

    source: Hashable
    target: Hashable
    target_rank: int
    source_score: int
    target_score: int


@dataclass(frozen=True)
class BootstrapVouchCreated:
    """
    A vouch created during the bootstrap window.

    seed_index is the number of seeded vouches that existed before this one
    (0 for the very first vouch of the network).
    """

    source: Hashable
    target: Hashable
    seed_index: int
    target_rank: int
    source_score: int
    target_score: int


@dataclass(frozen=True)
class BootstrapCompleted:
    """The bootstrap window closed after seed_count seeded vouches."""

    seed_count: int


@dataclass(frozen=True)
class VouchRemoved:
    """A vouch removed; metrics are the post-removal values."""

    source: Hashable
    target: Hashable
    target_rank: int
    source_score: int
    target_score: int


Observer = Callable[[object], None]


class ChangeNotifier:
    """
    Fan-out of engine events to subscribed observers.

    Observers are called synchronously, in subscription order. An observer
    that raises is logged with its traceback and skipped; delivery continues
    with the next observer and the committed operation stands.
    """

    def __init__(self) -> None:
        self._observers: list[Observer] = []

    def subscribe(self, observer: Observer) -> Observer:
        """Register observer; returns it so this can be used as a decorator."""
        if not callable(observer):
            raise TypeError(f"observer must be callable, got {type(observer).__name__}")
        self._observers.append(observer)
        return observer

    def unsubscribe(self, observer: Observer) -> None:
        """Remove observer. Unknown observers are ignored."""
        try:
            self._observers.remove(observer)
        except ValueError:
            logger.debug("unsubscribe: observer %r was not subscribed.", observer)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def publish(self, events: Iterable[object]) -> None:
        """Deliver each event, in order, to every observer."""
        observers = list(self._observers)
        for event in events:
            for observer in observers:
                try:
                    observer(event)
                except Exception:
                    logger.exception(
                        "Observer %r failed while handling %s.",
                        observer,
                        type(event).__name__,
                    )


class EventRecorder:
    """
    Observer that keeps an ordered log of every event it receives.

    Usage:
        recorder = EventRecorder()
        network.notifier.subscribe(recorder)
        network.add_edge("alice", "bob")
        recorder.of_type(VouchCreated)
    """

    def __init__(self) -> None:
        self.events: list[object] = []

    def __call__(self, event: object) -> None:
        self.events.append(event)

    def of_type(self, *event_types: Type) -> list:
        return [e for e in self.events if isinstance(e, event_types)]

    def clear(self) -> None:
        self.events.clear()

    def __len__(self) -> int:
        return len(self.events)

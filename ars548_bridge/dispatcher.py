"""
ARS548 Bridge Demand-Gated Dispatch
=====================================

Derived representations of a frame are only built when some consumer wants
them. Demand is asked from each destination through ``has_subscribers()``,
so the dispatcher does not depend on any transport's introspection API.

The primary (pass-through) frame is published last, exactly once, after every
derived representation has been built from it, even when building one of them
fails.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Protocol, Sequence, runtime_checkable

logger = logging.getLogger(__name__)


# =============================================================================
# DESTINATIONS
# =============================================================================

@runtime_checkable
class DemandPredicate(Protocol):
    """Whether a destination currently has at least one consumer."""

    def has_subscribers(self) -> bool:
        ...


@runtime_checkable
class Publisher(DemandPredicate, Protocol):
    """Destination that can be asked for demand and handed messages."""

    def publish(self, message: Any) -> None:
        ...


class LocalPublisher:
    """
    In-process destination.

    Keeps every published message in ``messages`` and forwards it to the
    subscribed callbacks. Demand is the number of subscriptions.
    """

    def __init__(self, topic: str, subscriber_count: int = 0):
        self.topic = topic
        self.subscriber_count = subscriber_count
        self.messages: List[Any] = []
        self._callbacks: List[Callable[[Any], None]] = []

    def has_subscribers(self) -> bool:
        return self.subscriber_count > 0

    def subscribe(self, callback: Optional[Callable[[Any], None]] = None):
        self.subscriber_count += 1
        if callback is not None:
            self._callbacks.append(callback)

    def unsubscribe(self, callback: Optional[Callable[[Any], None]] = None):
        if self.subscriber_count == 0:
            raise ValueError(f"{self.topic}: no subscription to remove")
        self.subscriber_count -= 1
        if callback is not None:
            self._callbacks.remove(callback)

    def publish(self, message: Any) -> None:
        self.messages.append(message)
        for callback in self._callbacks:
            callback(message)

    def __repr__(self):
        return (f"LocalPublisher(topic={self.topic!r}, subscribers={self.subscriber_count}, "
                f"published={len(self.messages)})")


# =============================================================================
# DISPATCH
# =============================================================================

@dataclass
class Derivation:
    """A representation built from the primary frame for one destination.

    ``on_published`` runs only after the built message was handed to the
    publisher without error.
    """
    name: str
    publisher: Publisher
    build: Callable[[Any], Any]
    on_published: Optional[Callable[[], None]] = None


@dataclass
class DispatchReport:
    built: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    forwarded: bool = False


class DemandGatedDispatcher:
    """
    Builds and publishes only the demanded representations of a frame.

    A derivation that raises does not stop the others or the pass-through
    publication; the first such error is re-raised once the primary frame
    has been forwarded.

    Args:
        gate_passthrough: Also skip the pass-through publication when its
            destination has no consumer. Off by default: the primary frame is
            always forwarded.
    """

    def __init__(self, gate_passthrough: bool = False):
        self.gate_passthrough = gate_passthrough

    def dispatch(self, primary: Any, derivations: Sequence[Derivation],
                 passthrough: Publisher) -> DispatchReport:
        report = DispatchReport()
        errors: List[Exception] = []

        for derivation in derivations:
            if not derivation.publisher.has_subscribers():
                report.skipped.append(derivation.name)
                continue
            try:
                derivation.publisher.publish(derivation.build(primary))
            except Exception as exc:
                logger.error("%s: build or publish failed: %s", derivation.name, exc)
                report.failed.append(derivation.name)
                errors.append(exc)
                continue
            if derivation.on_published is not None:
                derivation.on_published()
            report.built.append(derivation.name)

        if not self.gate_passthrough or passthrough.has_subscribers():
            passthrough.publish(primary)
            report.forwarded = True

        logger.debug("dispatch: built=%s skipped=%s failed=%s forwarded=%s",
                     report.built, report.skipped, report.failed, report.forwarded)
        if errors:
            raise errors[0]
        return report

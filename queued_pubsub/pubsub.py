"""PubSub facade: subscription registry + topic queue + the drain-and-deliver loop."""

import asyncio
from typing import Any, List, Optional, Tuple, Union

from queued_pubsub.combinator import CombineFn, MessageCombinator, as_combinator
from queued_pubsub.config import get_settings
from queued_pubsub.message import topic_of
from queued_pubsub.observability import Metrics, get_logger
from queued_pubsub.registry import SubscriptionRegistry
from queued_pubsub.subscription import Callback, Deferred
from queued_pubsub.topic_queue import TopicQueue


class PubSub:
    """
    In-process publish/subscribe with an optional coalescing queue.

    Producers queue messages (add_to_queue) and/or publish them; publish drains
    the queue, delivering every message to every live subscriber. A callback
    returning True, directly or from a coroutine, is unsubscribed after that
    delivery.
    """

    def __init__(
        self,
        combinator: Union[MessageCombinator[Any], CombineFn, None] = None,
        *,
        serialize_publish: Optional[bool] = None,
        metrics: Optional[Metrics] = None,
    ) -> None:
        if serialize_publish is None:
            serialize_publish = get_settings().serialize_publish
        self._registry = SubscriptionRegistry()
        self._queue = TopicQueue(as_combinator(combinator))
        self._metrics = metrics if metrics is not None else Metrics()
        self._publish_lock: Optional[asyncio.Lock] = asyncio.Lock() if serialize_publish else None
        self._logger = get_logger("queued_pubsub.pubsub")

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    @property
    def subscriber_count(self) -> int:
        return len(self._registry)

    @property
    def serializes_publish(self) -> bool:
        return self._publish_lock is not None

    # ---- Subscriptions ----

    def subscribe(self, callback: Callback) -> int:
        """Register callback for every published message; returns its subscription id."""
        subscription_id = self._registry.subscribe(callback)
        self._metrics.set_gauge("subscribers", len(self._registry))
        return subscription_id

    def unsubscribe(self, subscription_id: int) -> bool:
        """Remove a subscription. Returns False for unknown or already removed ids."""
        removed = self._registry.unsubscribe(subscription_id)
        if removed:
            self._metrics.set_gauge("subscribers", len(self._registry))
        return removed

    def is_subscribed(self, subscription_id: int) -> bool:
        return self._registry.is_subscribed(subscription_id)

    # ---- Queue ----

    def add_to_queue(self, message: Any) -> None:
        """Queue message (combining it with its topic's tail if configured) without delivering."""
        collapsed = self._queue.push(message)
        self._metrics.increment("messages_queued")
        if collapsed:
            self._metrics.increment("messages_combined", collapsed)
        self._metrics.set_gauge("queue_length", self._queue.get_length())
        self._logger.debug(
            "queued",
            extra={"topic": topic_of(message), "collapsed": collapsed},
        )

    def get_queue_length(self) -> int:
        return self._queue.get_length()

    # ---- Publish ----

    async def publish(self, message: Any = None) -> None:
        """
        Optionally queue message, then drain the queue: each message queued at
        the start of the drain is delivered to all live subscribers in turn,
        awaiting that message's coroutine callbacks before moving to the next.

        Messages queued while the drain runs are left for the next publish.
        A callback exception (sync or async) propagates out of publish and
        leaves the undelivered messages queued for a retry.

        Unless the instance was created with serialize_publish=True, overlapping
        publish calls on one instance are not coordinated and may interleave
        their drains; callers must not overlap them.
        """
        if message is not None:
            self.add_to_queue(message)
        if self._publish_lock is None:
            await self._drain()
            return
        async with self._publish_lock:
            await self._drain()

    async def _drain(self) -> None:
        delivered = 0
        try:
            for topic, message in self._queue.entries():
                # Absent when a push during this drain combined it into a newer entry.
                if not self._queue.take(topic, message):
                    continue
                try:
                    await self._deliver(topic, message)
                except asyncio.CancelledError:
                    self._queue.requeue(topic, message)
                    raise
                except Exception:
                    self._queue.requeue(topic, message)
                    self._metrics.increment("publish_failures")
                    self._logger.exception(
                        "delivery_failed",
                        extra={
                            "topic": topic,
                            "delivered": delivered,
                            "remaining": self._queue.get_length(),
                        },
                    )
                    raise
                delivered += 1
                self._metrics.increment("messages_delivered")
                self._metrics.set_gauge("queue_length", self._queue.get_length())
        finally:
            self._queue.prune()
        self._logger.debug(
            "drained",
            extra={"delivered": delivered, "remaining": self._queue.get_length()},
        )

    async def _deliver(self, topic: str, message: Any) -> None:
        """Invoke every subscriber registered now, then await the deferred outcomes together."""
        subscription_ids = self._registry.snapshot()
        self._logger.debug(
            "delivering",
            extra={"topic": topic, "subscriber_count": len(subscription_ids)},
        )
        deferred: List[Tuple[int, Deferred]] = []
        try:
            for subscription_id in subscription_ids:
                subscription = self._registry.get(subscription_id)
                if subscription is None:
                    continue
                outcome = subscription.invoke(message)
                self._metrics.increment("callbacks_invoked")
                if isinstance(outcome, Deferred):
                    deferred.append((subscription_id, outcome))
                elif outcome.unsubscribe:
                    self._auto_unsubscribe(subscription_id)
        except Exception:
            for _, outcome in deferred:
                outcome.discard()
            raise
        if deferred:
            await asyncio.gather(
                *(self._settle(subscription_id, outcome) for subscription_id, outcome in deferred)
            )

    async def _settle(self, subscription_id: int, outcome: Deferred) -> None:
        if await outcome.settle():
            self._auto_unsubscribe(subscription_id)

    def _auto_unsubscribe(self, subscription_id: int) -> None:
        if self.unsubscribe(subscription_id):
            self._metrics.increment("auto_unsubscribed")

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(subscribers={len(self._registry)}, "
            f"queued={self._queue.get_length()})"
        )

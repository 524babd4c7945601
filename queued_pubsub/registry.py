"""In-memory subscription registry: issues ids and owns the id -> callback table."""

import itertools
from typing import Dict, List, Optional

from queued_pubsub.observability import get_logger
from queued_pubsub.subscription import Callback, Subscription


class SubscriptionRegistry:
    """
    Subscriptions keyed by id. Ids start at 1, only ever increase and are never
    reused. Iteration order is registration order (dicts keep insertion order).
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[int, Subscription] = {}
        self._ids = itertools.count(1)
        self._logger = get_logger("queued_pubsub.registry")

    def subscribe(self, callback: Callback) -> int:
        """Store callback under a fresh id and return the id."""
        subscription = Subscription(next(self._ids), callback)
        self._subscriptions[subscription.subscription_id] = subscription
        self._logger.info(
            "subscribed",
            extra={
                "subscription_id": subscription.subscription_id,
                "is_async": subscription.is_async,
            },
        )
        return subscription.subscription_id

    def unsubscribe(self, subscription_id: int) -> bool:
        """Remove the subscription. Returns False if it was not registered."""
        if self._subscriptions.pop(subscription_id, None) is None:
            return False
        self._logger.info("unsubscribed", extra={"subscription_id": subscription_id})
        return True

    def is_subscribed(self, subscription_id: int) -> bool:
        return subscription_id in self._subscriptions

    def get(self, subscription_id: int) -> Optional[Subscription]:
        """Return the subscription by id or None."""
        return self._subscriptions.get(subscription_id)

    def snapshot(self) -> List[int]:
        """Ids registered right now, in registration order."""
        return list(self._subscriptions)

    def __contains__(self, subscription_id: object) -> bool:
        return subscription_id in self._subscriptions

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(subscriptions={len(self._subscriptions)})"

"""In-process, topic-keyed pub-sub with an optional coalescing message queue."""

from queued_pubsub.combinator import (
    FunctionCombinator,
    KeepNewest,
    KeepOldest,
    MessageCombinator,
    as_combinator,
)
from queued_pubsub.errors import InvalidMessageError, PubSubError
from queued_pubsub.message import HasTopic, Message, topic_of
from queued_pubsub.pubsub import PubSub
from queued_pubsub.registry import SubscriptionRegistry
from queued_pubsub.subscription import Deferred, Immediate, Subscription
from queued_pubsub.topic_queue import TopicQueue

__all__ = [
    "PubSub",
    "Message",
    "HasTopic",
    "topic_of",
    "MessageCombinator",
    "FunctionCombinator",
    "KeepNewest",
    "KeepOldest",
    "as_combinator",
    "SubscriptionRegistry",
    "Subscription",
    "Immediate",
    "Deferred",
    "TopicQueue",
    "PubSubError",
    "InvalidMessageError",
]

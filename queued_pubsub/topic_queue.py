"""Per-topic message queue with cascading combination on push."""

from collections import deque
from typing import Any, Deque, Dict, Iterator, List, Optional, Tuple

from queued_pubsub.combinator import MessageCombinator
from queued_pubsub.message import topic_of
from queued_pubsub.observability import get_logger


class TopicQueue:
    """
    Ordered buffers of pending messages, one per topic. Topics are traversed in
    the order they were first created, messages in the order they were queued.
    """

    def __init__(self, combinator: Optional[MessageCombinator[Any]] = None) -> None:
        self._queues: Dict[str, Deque[Any]] = {}
        self._combinator = combinator
        self._logger = get_logger("queued_pubsub.queue")

    def push(self, message: Any) -> int:
        """
        Append message to its topic. With a combinator, the incoming message is
        combined with the current last entry repeatedly until combine() returns
        None or the topic empties; each hit pops that last entry.
        Returns how many queued entries were collapsed.
        """
        topic = topic_of(message)
        queue = self._queues.setdefault(topic, deque())
        if not queue or self._combinator is None:
            queue.append(message)
            return 0

        collapsed = 0
        while queue:
            combined = self._combinator.combine(queue[-1], message)
            if combined is None:
                break
            queue.pop()
            message = combined
            collapsed += 1
        queue.append(message)
        if collapsed:
            self._logger.debug(
                "combined",
                extra={"topic": topic, "collapsed": collapsed, "topic_length": len(queue)},
            )
        return collapsed

    def entries(self) -> List[Tuple[str, Any]]:
        """Snapshot of (topic key, message) pairs in traversal order."""
        return [(topic, message) for topic, queue in self._queues.items() for message in queue]

    def take(self, topic: str, message: Any) -> bool:
        """
        Remove this exact message object from the buffer of topic (the key it
        was queued under). Returns False if it is no longer queued there.
        """
        queue = self._queues.get(topic)
        if not queue:
            return False
        if queue[0] is message:
            queue.popleft()
            return True
        for index, queued in enumerate(queue):
            if queued is message:
                del queue[index]
                return True
        return False

    def requeue(self, topic: str, message: Any) -> None:
        """Put a taken message back at the head of topic, without combining."""
        self._queues.setdefault(topic, deque()).appendleft(message)

    def prune(self) -> None:
        """Forget topics whose buffers are empty."""
        for topic in [t for t, queue in self._queues.items() if not queue]:
            del self._queues[topic]

    def get_length(self) -> int:
        """Total number of queued messages across all topics."""
        return sum(len(queue) for queue in self._queues.values())

    def make_empty(self) -> None:
        """Discard every topic and its messages."""
        self._queues.clear()

    def topics(self) -> List[str]:
        """Topics holding messages, in first-creation order."""
        return [topic for topic, queue in self._queues.items() if queue]

    def __iter__(self) -> Iterator[Any]:
        """One-shot iterator over a snapshot of the queue taken now."""
        return iter([message for _, message in self.entries()])

    def __len__(self) -> int:
        return self.get_length()

    def __repr__(self) -> str:
        return f"TopicQueue(topics={len(self.topics())}, messages={self.get_length()})"

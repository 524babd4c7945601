"""Message capability (anything with a `topic`) and a ready-made pydantic model."""

from typing import Any, Dict, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from queued_pubsub.errors import InvalidMessageError


@runtime_checkable
class HasTopic(Protocol):
    """Structural requirement for every queued message: a string `topic`."""

    topic: str


class Message(BaseModel):
    """Topic plus arbitrary payload fields, e.g. Message(topic="prices", id=3)."""

    model_config = ConfigDict(extra="allow")

    topic: str

    @property
    def payload(self) -> Dict[str, Any]:
        """Every field except `topic`."""
        return dict(self.model_extra or {})


def topic_of(message: Any) -> str:
    """Return the message's topic, or raise InvalidMessageError."""
    if not isinstance(message, HasTopic) or not isinstance(message.topic, str):
        raise InvalidMessageError(message)
    return message.topic

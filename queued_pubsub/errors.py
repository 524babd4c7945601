"""Exception types raised by the pub-sub core."""


class PubSubError(Exception):
    """Base class for errors raised by queued_pubsub itself (never for callback failures)."""


class InvalidMessageError(PubSubError, TypeError):
    """Raised when a message does not expose a string `topic` attribute."""

    def __init__(self, message: object) -> None:
        super().__init__(
            f"message must expose a str `topic` attribute, got {type(message).__name__}"
        )
        self.rejected = message

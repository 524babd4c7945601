"""Observability: logging and metrics for the pub-sub dispatcher."""

from queued_pubsub.observability.logger import get_logger
from queued_pubsub.observability.metrics import Metrics

__all__ = ["get_logger", "Metrics"]

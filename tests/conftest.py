"""Shared fixtures for queued_pubsub tests."""

import pytest

from queued_pubsub import Message, PubSub


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of configuration-sensitive tests."""
    monkeypatch.delenv("PUBSUB_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PUBSUB_SERIALIZE_PUBLISH", raising=False)


@pytest.fixture
def pubsub():
    return PubSub()


def make_message(topic: str = "dummy", **payload) -> Message:
    return Message(topic=topic, **payload)

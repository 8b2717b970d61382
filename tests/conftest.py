"""Shared fixtures: sample batches of messages."""

import pytest

from fieldexpr.message import Batch, Message


def make_message(payload: str, **metadata) -> Message:
    message = Message.from_text(payload)
    for key, value in metadata.items():
        message.set_metadata(key, value)
    return message


@pytest.fixture
def alice():
    return make_message(
        '{"name": "Alice", "score": 100, "level": 5}',
        user_id="123",
        timestamp="2024-01-01T10:00:00Z",
        source="api",
        priority="high",
    )


@pytest.fixture
def test_batch(alice):
    """Three messages with metadata source = api, webhook, api."""
    bob = make_message(
        '{"name": "Bob", "score": 200, "level": 8}',
        user_id="456",
        timestamp="2024-01-01T10:01:00Z",
        source="webhook",
        priority="medium",
    )
    charlie = make_message(
        '{"name": "Charlie", "score": 300, "level": 12}',
        user_id="789",
        timestamp="2024-01-01T10:02:00Z",
        source="api",
        priority="low",
    )
    return Batch([alice, bob, charlie])


@pytest.fixture
def single_batch(alice):
    return Batch([alice])


@pytest.fixture
def empty_batch():
    return Batch()

import pytest
from hypothesis import given, strategies as st

from queued_pubsub import InvalidMessageError, KeepNewest, TopicQueue, as_combinator
from tests.conftest import make_message


def same_parity_keep_older(older, newer):
    return older if older.id % 2 == newer.id % 2 else None


def successor_keep_newer(older, newer):
    return newer if newer.id == older.id + 1 else None


def heavier_wins(older, newer):
    return newer if newer.weight >= older.weight else None


def ids(queue):
    return [m.id for m in queue]


def test_fifo_without_combinator():
    queue = TopicQueue()
    for i in range(10):
        queue.push(make_message("t", id=i))
    assert queue.get_length() == 10
    assert len(queue) == 10
    assert ids(queue) == list(range(10))


def test_consecutive_ids_cascade_to_single_message():
    queue = TopicQueue(as_combinator(successor_keep_newer))
    for i in range(100):
        queue.push(make_message("t", id=i))
    assert queue.get_length() == 1
    assert ids(queue) == [99]


def test_same_parity_run_collapses_to_oldest():
    queue = TopicQueue(as_combinator(same_parity_keep_older))
    for i in range(100):
        queue.push(make_message("t", id=2 * i))
    assert queue.get_length() == 1
    assert ids(queue) == [0]


def test_alternating_parity_never_probes_past_predecessor():
    # every entry two steps back shares parity, but the immediate predecessor never does
    queue = TopicQueue(as_combinator(same_parity_keep_older))
    for i in range(100):
        queue.push(make_message("t", id=i))
    assert queue.get_length() == 100


def test_cascade_collapses_several_trailing_entries():
    queue = TopicQueue(as_combinator(heavier_wins))
    for weight in (3, 2, 1):
        assert queue.push(make_message("t", weight=weight)) == 0
    assert queue.get_length() == 3
    assert queue.push(make_message("t", weight=5)) == 3
    assert [m.weight for m in queue] == [5]


def test_cascade_stops_at_first_non_combinable_entry():
    queue = TopicQueue(as_combinator(heavier_wins))
    for weight in (5, 1):
        queue.push(make_message("t", weight=weight))
    assert queue.push(make_message("t", weight=3)) == 1
    assert [m.weight for m in queue] == [5, 3]


def test_topics_never_combine_with_each_other():
    queue = TopicQueue(as_combinator(lambda older, newer: older))
    queue.push(make_message("a", id=1))
    queue.push(make_message("b", id=1))
    assert queue.get_length() == 2
    queue.push(make_message("a", id=2))
    assert queue.get_length() == 2


def test_first_push_to_topic_skips_combinator():
    calls = []

    def record(older, newer):
        calls.append((older, newer))
        return None

    queue = TopicQueue(as_combinator(record))
    queue.push(make_message("a", id=1))
    queue.push(make_message("b", id=1))
    assert calls == []


def test_traversal_orders_topics_by_first_creation():
    queue = TopicQueue()
    queue.push(make_message("b", id=1))
    queue.push(make_message("a", id=2))
    queue.push(make_message("b", id=3))
    queue.push(make_message("a", id=4))
    assert queue.topics() == ["b", "a"]
    assert ids(queue) == [1, 3, 2, 4]


def test_traversal_is_a_snapshot():
    queue = TopicQueue()
    queue.push(make_message("a", id=1))
    traversal = iter(queue)
    queue.push(make_message("a", id=2))
    queue.push(make_message("c", id=3))
    assert [m.id for m in traversal] == [1]
    assert list(traversal) == []


def test_make_empty_discards_everything():
    queue = TopicQueue()
    queue.push(make_message("a", id=1))
    queue.push(make_message("b", id=2))
    queue.make_empty()
    assert queue.get_length() == 0
    assert queue.topics() == []
    assert list(queue) == []


def test_take_removes_by_identity():
    queue = TopicQueue()
    first = make_message("a", id=1)
    twin = make_message("a", id=1)
    queue.push(first)
    queue.push(twin)
    assert queue.take("a", twin) is True
    assert len(queue) == 1
    assert next(iter(queue)) is first
    assert queue.take("a", twin) is False
    assert queue.take("missing", first) is False


def test_take_from_head_then_requeue_restores_order():
    queue = TopicQueue()
    first, second = make_message("a", id=1), make_message("a", id=2)
    queue.push(first)
    queue.push(second)
    assert queue.take("a", first) is True
    queue.requeue("a", first)
    assert ids(queue) == [1, 2]


def test_requeue_does_not_combine():
    queue = TopicQueue(KeepNewest())
    queue.push(make_message("a", id=2))
    queue.requeue("a", make_message("a", id=1))
    assert ids(queue) == [1, 2]


def test_emptied_topic_keeps_position_until_pruned():
    queue = TopicQueue()
    message = make_message("a", id=1)
    queue.push(message)
    queue.push(make_message("b", id=2))
    queue.take("a", message)
    assert queue.topics() == ["b"]
    queue.requeue("a", message)
    assert queue.topics() == ["a", "b"]
    queue.take("a", message)
    queue.prune()
    queue.push(message)
    assert queue.topics() == ["b", "a"]


def test_entries_are_keyed_by_buffer_not_message_topic():
    queue = TopicQueue(as_combinator(lambda older, newer: make_message("other", id=99)))
    queue.push(make_message("t", id=1))
    queue.push(make_message("t", id=2))
    [(key, message)] = queue.entries()
    assert key == "t"
    assert message.topic == "other"
    assert queue.take(key, message) is True
    assert queue.get_length() == 0


def test_push_rejects_message_without_topic():
    queue = TopicQueue()
    with pytest.raises(InvalidMessageError):
        queue.push({"topic": "a"})
    with pytest.raises(TypeError):
        queue.push(object())
    assert queue.get_length() == 0
    assert queue.topics() == []


def test_keep_newest_with_key():
    queue = TopicQueue(KeepNewest(key=lambda m: m.symbol))
    queue.push(make_message("prices", symbol="ACME", price=10))
    queue.push(make_message("prices", symbol="ACME", price=11))
    queue.push(make_message("prices", symbol="INIT", price=3))
    assert [(m.symbol, m.price) for m in queue] == [("ACME", 11), ("INIT", 3)]


@given(st.lists(st.sampled_from(["a", "b", "c"]), max_size=60))
def test_length_equals_pushes_without_combinator(topics):
    queue = TopicQueue()
    for i, topic in enumerate(topics):
        queue.push(make_message(topic, id=i))
    assert queue.get_length() == len(topics)


@given(st.lists(st.integers(min_value=0, max_value=9), max_size=60))
def test_no_adjacent_combinable_pair_after_any_push(weights):
    queue = TopicQueue(as_combinator(heavier_wins))
    for weight in weights:
        before = queue.get_length()
        collapsed = queue.push(make_message("t", weight=weight))
        assert queue.get_length() == before + 1 - collapsed
        queued = list(queue)
        for older, newer in zip(queued, queued[1:]):
            assert heavier_wins(older, newer) is None

import pytest

from queued_pubsub import FunctionCombinator, KeepNewest, KeepOldest, as_combinator
from tests.conftest import make_message


def test_as_combinator_wraps_function():
    combinator = as_combinator(lambda older, newer: newer)
    assert isinstance(combinator, FunctionCombinator)
    older, newer = make_message(id=1), make_message(id=2)
    assert combinator.combine(older, newer) is newer


def test_as_combinator_passes_objects_and_none_through():
    keep = KeepOldest()
    assert as_combinator(keep) is keep
    assert as_combinator(None) is None


def test_as_combinator_rejects_non_callables():
    with pytest.raises(TypeError):
        as_combinator(42)


def test_keep_newest_and_oldest_without_key():
    older, newer = make_message(id=1), make_message(id=2)
    assert KeepNewest().combine(older, newer) is newer
    assert KeepOldest().combine(older, newer) is older


def test_key_mismatch_means_no_collapse():
    older, newer = make_message(kind="x"), make_message(kind="y")
    assert KeepNewest(key=lambda m: m.kind).combine(older, newer) is None
    assert KeepOldest(key=lambda m: m.kind).combine(older, newer) is None

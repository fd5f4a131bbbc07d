"""Tests for batching and inter-batch pauses."""
import pytest

from leadflow_core.jobs import Batcher, BatchPolicy, RecordError, Succeeded


def _run(count, size, delay=1.0):
    flushed = []
    applied = []
    pauses = []

    def flush(batch):
        flushed.append(len(batch))
        return [Succeeded(x) for x in batch]

    batcher = Batcher(
        BatchPolicy(size=size, delay_seconds=delay),
        flush,
        lambda batch, results: applied.extend(results),
        sleep=pauses.append,
    )
    for i in range(count):
        batcher.add(i)
    batcher.close()
    return batcher, flushed, applied, pauses


def test_three_flushes_two_pauses():
    batcher, flushed, applied, pauses = _run(120, 50)
    assert flushed == [50, 50, 20]
    assert pauses == [1.0, 1.0]
    assert batcher.flush_count == 3
    assert batcher.pause_count == 2
    assert len(applied) == 120


def test_exact_multiple_has_no_trailing_pause():
    _, flushed, _, pauses = _run(100, 50)
    assert flushed == [50, 50]
    assert len(pauses) == 1


def test_single_partial_batch():
    _, flushed, _, pauses = _run(7, 50)
    assert flushed == [7]
    assert pauses == []


def test_nothing_to_flush():
    _, flushed, _, pauses = _run(0, 50)
    assert flushed == []
    assert pauses == []


def test_zero_delay_never_sleeps():
    _, flushed, _, pauses = _run(1200, 500, delay=0)
    assert flushed == [500, 500, 200]
    assert pauses == []


def test_flush_must_answer_for_every_item():
    batcher = Batcher(
        BatchPolicy(size=2, delay_seconds=0),
        lambda batch: [RecordError("only one")],
        lambda batch, results: None,
    )
    batcher.add("a")
    with pytest.raises(ValueError, match="1 outcomes for 2 records"):
        batcher.add("b")


@pytest.mark.parametrize("size,delay", [(0, 1.0), (10, -1)])
def test_policy_validation(size, delay):
    with pytest.raises(ValueError):
        BatchPolicy(size=size, delay_seconds=delay)


def test_stop_during_pause_keeps_item_out():
    flushed = []
    stop = []

    def flush(batch):
        flushed.append(list(batch))
        return [Succeeded(x) for x in batch]

    batcher = Batcher(
        BatchPolicy(size=1, delay_seconds=1.0),
        flush,
        lambda batch, results: None,
        sleep=lambda seconds: stop.append(True),
        should_stop=lambda: bool(stop),
    )
    assert batcher.add("a") is True
    assert batcher.add("b") is False
    batcher.close()
    assert flushed == [["a"]]
    assert batcher.pause_count == 1


def test_close_after_full_flush_does_not_pause():
    batcher, flushed, _, pauses = _run(50, 50)
    assert flushed == [50]
    assert pauses == []
    assert batcher.pause_count == 0

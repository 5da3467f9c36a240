import random

import pytest

from agentic_invest.pipeline.dedupe import dedupe_citations
from agentic_invest.pipeline.exceptions import PipelineBusyError
from agentic_invest.pipeline.models import Citation, StageOutput, ValuationSample
from agentic_invest.pipeline.stages import PipelineStatus, Stage
from agentic_invest.pipeline.state import SessionStore
from agentic_invest.pipeline.valuation import next_valuation_sample


def test_dedupe_keeps_first_occurrence_in_order():
    citations = [
        Citation(uri="u1", title="First"),
        Citation(uri="u2", title="Second"),
        Citation(uri="u1", title="First again"),
        Citation(uri="u3", title="Third"),
        Citation(uri="u2", title="Second again"),
    ]

    result = dedupe_citations(citations)

    assert [(c.uri, c.title) for c in result] == [
        ("u1", "First"),
        ("u2", "Second"),
        ("u3", "Third"),
    ]
    assert dedupe_citations(result) == result


def test_dedupe_drops_incomplete_citations():
    citations = [Citation(uri="", title="No uri"), Citation(uri="u1", title="")]

    assert dedupe_citations(citations) == []
    assert dedupe_citations([]) == []


def test_valuation_follows_day_and_stays_in_band():
    last = ValuationSample(day=7, value=100000)
    rng = random.Random(42)

    for _ in range(200):
        sample = next_valuation_sample(last, rng)
        assert sample.day == 8
        assert 98000 <= sample.value <= 103000


def test_valuation_extremes():
    class Fixed:
        def __init__(self, value):
            self.value = value

        def random(self):
            return self.value

    last = ValuationSample(day=1, value=100000)
    assert next_valuation_sample(last, Fixed(0.0)).value == 98000
    assert next_valuation_sample(last, Fixed(0.4)).value == 100000
    assert next_valuation_sample(ValuationSample(day=1, value=0), Fixed(0.9)).value == 0


def test_store_rejects_concurrent_runs():
    store = SessionStore()
    store.begin_run("s")

    with pytest.raises(PipelineBusyError):
        store.begin_run("s")
    assert store.status == PipelineStatus.RUNNING


def test_store_fail_clears_trades_and_keeps_outputs():
    store = SessionStore()
    store.begin_run("s")
    store.enter_stage(Stage.TREND_DETECTION)
    store.record_output(Stage.TREND_DETECTION, StageOutput(text="found PLTR"))

    store.fail("boom")

    snapshot = store.snapshot()
    assert snapshot.status == PipelineStatus.ERROR
    assert snapshot.current_stage == Stage.IDLE
    assert snapshot.error_message == "boom"
    assert snapshot.stage_outputs[Stage.TREND_DETECTION].text == "found PLTR"
    assert snapshot.trades == []


def test_store_history_must_advance_by_one_day():
    store = SessionStore([ValuationSample(day=3, value=100)])

    with pytest.raises(ValueError):
        store.append_valuation(ValuationSample(day=5, value=100))

    store.append_valuation(ValuationSample(day=4, value=101))
    assert store.last_valuation.day == 4


def test_snapshot_is_isolated_from_store():
    store = SessionStore([ValuationSample(day=1, value=100)])
    snapshot = store.snapshot()
    snapshot.portfolio_history.append(ValuationSample(day=2, value=1))

    assert len(store.snapshot().portfolio_history) == 1


def test_failing_observer_does_not_break_others():
    store = SessionStore()
    received = []

    def broken(snapshot):
        raise RuntimeError("observer bug")

    store.subscribe(broken)
    unsubscribe = store.subscribe(received.append)
    store.begin_run("s")
    unsubscribe()
    store.complete()

    assert len(received) == 1
    assert received[0].status == PipelineStatus.RUNNING


def test_event_queue_receives_snapshots():
    store = SessionStore()
    queue = store.events()

    store.begin_run("s")
    store.enter_stage(Stage.TREND_DETECTION)
    store.close_events(queue)
    store.complete()

    assert queue.qsize() == 2
    assert queue.get_nowait().status == PipelineStatus.RUNNING
    assert queue.get_nowait().current_stage == Stage.TREND_DETECTION


def test_slow_event_reader_keeps_newest_snapshots():
    store = SessionStore()
    queue = store.events(maxsize=2)

    store.begin_run("s")
    store.enter_stage(Stage.TREND_DETECTION)
    store.enter_stage(Stage.FINANCIAL_SUMMARY)
    store.close_events(queue)

    assert queue.qsize() == 2
    assert queue.get_nowait().current_stage == Stage.TREND_DETECTION
    assert queue.get_nowait().current_stage == Stage.FINANCIAL_SUMMARY


def test_stage_order_and_labels():
    assert [s.index for s in Stage.pipeline()] == [0, 1, 2, 3, 4]
    assert Stage.IDLE.index == -1
    assert Stage.TREND_DETECTION.label == "Enhanced Twitter Agent"
    assert Stage.VALUATION_UPDATE.label == "Trade Execution"

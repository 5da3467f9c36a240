"""In-memory session state with observer notifications.

The orchestrator is the only writer. Observers (CLI progress printer,
dashboard API, tests) receive a deep-copied ``SessionSnapshot`` after every
mutation, so each stage transition is visible before the next stage starts.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from uuid import uuid4

from agentic_invest.config import Settings

from .exceptions import PipelineBusyError
from .models import (
    PipelineRun,
    SessionSnapshot,
    StageOutput,
    TradeRecommendation,
    ValuationSample,
)
from .stages import PipelineStatus, Stage

logger = logging.getLogger(__name__)

Observer = Callable[[SessionSnapshot], None]

EVENT_QUEUE_SIZE = 100


class SessionStore:
    """Holds the pipeline run, trades and portfolio history for one session."""

    def __init__(self, initial_history: Iterable[ValuationSample] = ()):
        self._run = PipelineRun()
        self._trades: list[TradeRecommendation] = []
        self._history: list[ValuationSample] = [
            sample.model_copy() for sample in initial_history
        ]
        self._observers: list[Observer] = []
        self._queues: list[asyncio.Queue[SessionSnapshot]] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionStore":
        """Create a store seeded with the configured portfolio history."""
        return cls(
            ValuationSample(day=point.day, value=point.value)
            for point in settings.portfolio.initial_history
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def status(self) -> PipelineStatus:
        return self._run.status

    @property
    def is_running(self) -> bool:
        return self._run.status == PipelineStatus.RUNNING

    @property
    def last_valuation(self) -> ValuationSample | None:
        return self._history[-1] if self._history else None

    def snapshot(self) -> SessionSnapshot:
        """Return a deep copy of everything observers may see."""
        return SessionSnapshot(
            run_id=self._run.run_id,
            status=self._run.status,
            current_stage=self._run.current_stage,
            stage_outputs={
                stage: output.model_copy(deep=True)
                for stage, output in self._run.stage_outputs.items()
            },
            trades=[trade.model_copy() for trade in self._trades],
            error_message=self._run.error_message,
            portfolio_history=[sample.model_copy() for sample in self._history],
            started_at=self._run.started_at,
            finished_at=self._run.finished_at,
        )

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register a callback invoked with a snapshot after every change."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def events(self, maxsize: int = EVENT_QUEUE_SIZE) -> asyncio.Queue[SessionSnapshot]:
        """Open an event channel; every change is put on the returned queue.

        A reader that falls behind loses the oldest snapshots, never the newest.
        """
        queue: asyncio.Queue[SessionSnapshot] = asyncio.Queue(maxsize=maxsize)
        self._queues.append(queue)
        return queue

    def close_events(self, queue: asyncio.Queue[SessionSnapshot]) -> None:
        if queue in self._queues:
            self._queues.remove(queue)

    # ------------------------------------------------------------------
    # Write side (orchestrator only)
    # ------------------------------------------------------------------

    def begin_run(self, strategy: str) -> str:
        """Reset per-run state and mark the session running.

        Raises:
            PipelineBusyError: if a run is already in flight.
        """
        if self.is_running:
            raise PipelineBusyError("A pipeline run is already in progress.")

        run_id = f"run_{uuid4().hex[:8]}"
        self._run = PipelineRun(
            run_id=run_id,
            status=PipelineStatus.RUNNING,
            current_stage=Stage.IDLE,
            strategy=strategy,
            started_at=datetime.now(timezone.utc),
        )
        self._trades = []
        self._publish()
        return run_id

    def enter_stage(self, stage: Stage) -> None:
        self._run.current_stage = stage
        self._publish()

    def record_output(self, stage: Stage, output: StageOutput) -> None:
        self._run.stage_outputs[stage] = output
        self._publish()

    def set_trades(self, trades: list[TradeRecommendation]) -> None:
        self._trades = list(trades)
        self._publish()

    def append_valuation(self, sample: ValuationSample) -> None:
        """Append to portfolio history; days must advance by exactly one."""
        last = self.last_valuation
        if last is not None and sample.day != last.day + 1:
            raise ValueError(
                f"Valuation day must follow {last.day}, got {sample.day}"
            )
        self._history.append(sample)
        self._publish()

    def complete(self) -> None:
        self._run.status = PipelineStatus.COMPLETED
        self._run.current_stage = Stage.IDLE
        self._run.finished_at = datetime.now(timezone.utc)
        self._publish()

    def fail(self, message: str) -> None:
        """Terminal error: clear trades, keep recorded stage outputs."""
        self._run.status = PipelineStatus.ERROR
        self._run.current_stage = Stage.IDLE
        self._run.error_message = message
        self._run.finished_at = datetime.now(timezone.utc)
        self._trades = []
        self._publish()

    def _publish(self) -> None:
        if not self._observers and not self._queues:
            return
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception as e:
                logger.warning(f"Session observer failed: {e}")
        for queue in list(self._queues):
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(snapshot)

"""FastAPI dashboard server for the agentic-invest pipeline."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from agentic_invest.config import get_settings
from agentic_invest.context import ProviderContext, build_context
from agentic_invest.pipeline.exceptions import PipelineBusyError
from agentic_invest.pipeline.models import SessionSnapshot
from agentic_invest.pipeline.orchestrator import PipelineOrchestrator
from agentic_invest.pipeline.stages import PipelineStatus, Stage
from agentic_invest.pipeline.state import SessionStore

logger = logging.getLogger(__name__)


class RunRequest(BaseModel):
    strategy: str | None = None


class RunAccepted(BaseModel):
    run_id: str | None
    status: str


class StageInfo(BaseModel):
    index: int
    stage: Stage
    label: str


def create_app(
    context: ProviderContext | None = None,
    store: SessionStore | None = None,
) -> FastAPI:
    """Build the dashboard app around one session store.

    The provider context is built from settings on the first run request when
    none is supplied, so the server starts without any API keys configured.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        tasks = list(app.state.tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    app = FastAPI(title="Agentic Invest Dashboard API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.context = context
    app.state.store = store or SessionStore.from_settings(get_settings())
    app.state.tasks = set()

    def _orchestrator() -> PipelineOrchestrator:
        if app.state.context is None:
            app.state.context = build_context()
        return PipelineOrchestrator(app.state.context, app.state.store)

    @app.get("/api/session", response_model=SessionSnapshot)
    async def get_session():
        """Current session: status, stage outputs, trades and portfolio history."""
        return app.state.store.snapshot()

    @app.get("/api/pipeline", response_model=list[StageInfo])
    async def get_pipeline():
        """Pipeline stages in execution order."""
        return [
            StageInfo(index=stage.index, stage=stage, label=stage.label)
            for stage in Stage.pipeline()
        ]

    @app.get("/api/session/events")
    async def stream_session():
        """Newline-delimited JSON snapshots, ending once no run is in progress."""
        store: SessionStore = app.state.store

        async def snapshots():
            queue = store.events()
            try:
                snapshot = store.snapshot()
                yield snapshot.model_dump_json(by_alias=True) + "\n"
                while snapshot.status == PipelineStatus.RUNNING:
                    snapshot = await queue.get()
                    yield snapshot.model_dump_json(by_alias=True) + "\n"
            finally:
                store.close_events(queue)

        return StreamingResponse(snapshots(), media_type="application/x-ndjson")

    @app.get("/api/strategy/default")
    async def get_default_strategy():
        return {"strategy": get_settings().pipeline.default_strategy}

    @app.post("/api/run", response_model=RunAccepted, status_code=202)
    async def start_run(request: RunRequest):
        """Start a pipeline cycle in the background."""
        strategy = request.strategy or get_settings().pipeline.default_strategy
        orchestrator = _orchestrator()

        try:
            task = orchestrator.start_cycle(strategy)
        except PipelineBusyError as e:
            raise HTTPException(status_code=409, detail=e.message)

        # Hold a reference so the task is not garbage collected mid-run
        app.state.tasks.add(task)
        task.add_done_callback(app.state.tasks.discard)

        snapshot = app.state.store.snapshot()
        logger.info(f"Started pipeline run {snapshot.run_id}")
        return RunAccepted(run_id=snapshot.run_id, status=str(snapshot.status))

    return app


app = create_app()

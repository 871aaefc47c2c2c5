import logging
from contextlib import asynccontextmanager
from typing import Iterable, Optional

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import ORJSONResponse
from prometheus_client import CONTENT_TYPE_LATEST

from config.config import build_prober_config, build_targets
from config.logging_config import setup_logging
from contracts.aggregate_report import AggregateReport
from contracts.prober_config import ProberConfig
from contracts.target import Target
from core.metrics_manager import ProbeMetrics
from core.prober import Prober

setup_logging()
logger = logging.getLogger(__name__)


def create_app(
    targets: Optional[Iterable[Target]] = None,
    prober_config: Optional[ProberConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
    metrics: Optional[ProbeMetrics] = None,
) -> FastAPI:
    """
    Build the status API.

    Targets and prober settings are read from the environment unless given.
    When no client is injected, the app opens a shared one for its lifespan.
    """
    targets = list(targets) if targets is not None else build_targets()
    prober_config = prober_config or build_prober_config()
    metrics = metrics or ProbeMetrics()
    prober = Prober(prober_config, client=client, metrics=metrics)

    @asynccontextmanager
    async def lifespan(app):
        owned_client = None
        if prober.client is None:
            owned_client = httpx.AsyncClient()
            prober.client = owned_client
        logger.info(
            f"Status API started with {len(targets)} targets, timeout={prober_config.timeout_ms}ms"
        )
        yield
        if owned_client is not None:
            prober.client = None
            await owned_client.aclose()

    app = FastAPI(lifespan=lifespan, default_response_class=ORJSONResponse)
    app.state.targets = targets
    app.state.prober = prober
    app.state.metrics = metrics

    @app.get("/api/health", response_model=AggregateReport)
    async def health(request: Request):
        # Always 200: a down verdict travels in the body, not the status line.
        report = await request.app.state.prober.probe_all(request.app.state.targets)
        return ORJSONResponse(
            report.to_json_dict(), headers={"Cache-Control": "no-store"}
        )

    @app.get("/metrics")
    def metrics_endpoint(request: Request):
        return Response(
            request.app.state.metrics.render(), media_type=CONTENT_TYPE_LATEST
        )

    return app


app = create_app()

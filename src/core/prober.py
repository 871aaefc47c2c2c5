import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union

import httpx

from contracts.aggregate_report import AggregateReport
from contracts.probe_result import ProbeResult
from contracts.prober_config import ProberConfig
from contracts.target import Target
from core.metrics_manager import ProbeMetrics
from core.profiler import Profiler
from core.status_rollup import rollup

logger = logging.getLogger(__name__)

TIMEOUT_ERROR = "timeout"


class Prober:
    """
    Probes targets over HTTP and rolls their reachability up into an aggregate report.
    """

    def __init__(
        self,
        config: ProberConfig,
        client: Optional[httpx.AsyncClient] = None,
        metrics: Optional[ProbeMetrics] = None,
    ):
        """
        Initialize the Prober.

        Args:
            config (ProberConfig): Timeout, client header and redirect settings.
            client (Optional[httpx.AsyncClient]): Shared client owned by the caller.
                When omitted, a client is opened and closed around every call.
            metrics (Optional[ProbeMetrics]): Sink for probe outcomes.
        """
        self.config = config
        self.client = client
        self.metrics = metrics
        self._headers = {
            "User-Agent": config.user_agent,
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }

    @asynccontextmanager
    async def _client_scope(self):
        if self.client is not None:
            yield self.client
            return
        async with httpx.AsyncClient() as client:
            yield client

    def _resolve_timeout(self, timeout_ms: Optional[int]) -> int:
        if timeout_ms is None:
            return self.config.timeout_ms
        if timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {timeout_ms}")
        return timeout_ms

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int((time.perf_counter() - start) * 1000)

    async def _probe(
        self, client: httpx.AsyncClient, target: Target, timeout_ms: int
    ) -> ProbeResult:
        start = time.perf_counter()
        try:
            # The deadline is disarmed when the scope exits, whatever the outcome.
            async with asyncio.timeout(timeout_ms / 1000):
                async with client.stream(
                    target.method,
                    target.url,
                    headers=self._headers,
                    follow_redirects=self.config.follow_redirects,
                    timeout=timeout_ms / 1000,
                ) as resp:
                    status = resp.status_code
            result = ProbeResult.for_target(
                target,
                ok=200 <= status <= 299,
                status=status,
                latency_ms=self._elapsed_ms(start),
            )
        except (TimeoutError, httpx.TimeoutException):
            result = ProbeResult.for_target(
                target,
                ok=False,
                status=0,
                latency_ms=self._elapsed_ms(start),
                error=TIMEOUT_ERROR,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            result = ProbeResult.for_target(
                target,
                ok=False,
                status=0,
                latency_ms=self._elapsed_ms(start),
                error=str(e) or type(e).__name__,
            )
        except Exception as e:
            logger.exception(f"Unexpected error probing {target.key} ({target.url})")
            result = ProbeResult.for_target(
                target,
                ok=False,
                status=0,
                latency_ms=self._elapsed_ms(start),
                error=f"{type(e).__name__}: {e}",
            )

        if result.ok:
            logger.info(
                f"Probe success for {target.key}: status={result.status}, latency={result.latency_ms}ms"
            )
        else:
            logger.warning(
                f"Probe failed for {target.key}: status={result.status}, "
                f"error={result.error}, latency={result.latency_ms}ms"
            )
        if self.metrics is not None:
            self.metrics.record_probe(result)
        return result

    @Profiler.profile
    async def probe_one(
        self, target: Target, timeout_ms: Optional[int] = None
    ) -> ProbeResult:
        """
        Issue one bounded request against a target.

        Failures are never raised; they are reported through the result's
        ok, status and error fields.

        Args:
            target (Target): The target to probe.
            timeout_ms (Optional[int]): Deadline in milliseconds; defaults to the
                configured timeout.

        Returns:
            ProbeResult: The outcome of the probe.
        """
        timeout_ms = self._resolve_timeout(timeout_ms)
        async with self._client_scope() as client:
            return await self._probe(client, target, timeout_ms)

    @Profiler.profile
    async def probe_all(
        self,
        targets: Iterable[Union[Target, dict]],
        timeout_ms: Optional[int] = None,
    ) -> AggregateReport:
        """
        Probe every target concurrently and roll the results up.

        Args:
            targets: Targets to probe, in display order. Keys must be distinct.
            timeout_ms (Optional[int]): Deadline applied to every probe; defaults
                to the configured timeout.

        Returns:
            AggregateReport: Results in input order plus the overall status.

        Raises:
            ValueError: If two targets share a key or the timeout is not positive.
        """
        targets = self._validate_targets(targets)
        timeout_ms = self._resolve_timeout(timeout_ms)

        async with self._client_scope() as client:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(self._probe(client, target, timeout_ms))
                    for target in targets
                ]
        results = [task.result() for task in tasks]

        report = AggregateReport(
            updated_at=datetime.now(timezone.utc),
            overall=rollup(results),
            results=results,
        )
        logger.info(
            f"Probed {len(results)} targets: overall={report.overall.value}, "
            f"ok={sum(r.ok for r in results)}/{len(results)}"
        )
        if self.metrics is not None:
            self.metrics.record_report(report)
        return report

    @staticmethod
    def _validate_targets(targets: Iterable[Union[Target, dict]]) -> List[Target]:
        validated = [
            t if isinstance(t, Target) else Target.model_validate(t) for t in targets
        ]
        seen = set()
        for target in validated:
            if target.key in seen:
                raise ValueError(f"Duplicate target key: {target.key}")
            seen.add(target.key)
        return validated

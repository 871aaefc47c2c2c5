import logging
from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

from contracts.aggregate_report import AggregateReport, OverallStatus
from contracts.probe_result import ProbeResult

logger = logging.getLogger(__name__)

OVERALL_STATUS_VALUES = {
    OverallStatus.OPERATIONAL: 1.0,
    OverallStatus.DEGRADED: 0.5,
    OverallStatus.DOWN: 0.0,
}


def classify(result: ProbeResult) -> str:
    """Return the outcome label of a probe result."""
    if result.ok:
        return "ok"
    if result.status:
        return "http_error"
    if result.error == "timeout":
        return "timeout"
    return "network_error"


class ProbeMetrics:
    """
    Prometheus metrics for probe outcomes and the last overall status.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        Initialize the probe metrics.

        Args:
            registry: Collector registry to register on. A private registry is
                created when omitted so that several instances never clash.
        """
        self.registry = registry if registry is not None else CollectorRegistry()
        self.PROBE_RESULTS = Counter(
            "probe_results_total",
            "Probe outcomes per target",
            ["target", "outcome"],
            registry=self.registry,
        )
        self.PROBE_LATENCY = Histogram(
            "probe_latency_seconds",
            "Probe latency in seconds",
            ["target"],
            registry=self.registry,
        )
        self.OVERALL_STATUS = Gauge(
            "overall_status",
            "Last overall status (1 operational, 0.5 degraded, 0 down)",
            registry=self.registry,
        )

    def record_probe(self, result: ProbeResult):
        outcome = classify(result)
        self.PROBE_RESULTS.labels(target=result.key, outcome=outcome).inc()
        self.PROBE_LATENCY.labels(target=result.key).observe(result.latency_ms / 1000)
        logger.debug(f"Recorded probe {result.key}: outcome={outcome}")

    def record_report(self, report: AggregateReport):
        self.OVERALL_STATUS.set(OVERALL_STATUS_VALUES[report.overall])

    def render(self) -> bytes:
        """Return the metrics in Prometheus text exposition format."""
        return generate_latest(self.registry)

from typing import Iterable

from contracts.aggregate_report import OverallStatus
from contracts.probe_result import ProbeResult


def rollup(results: Iterable[ProbeResult]) -> OverallStatus:
    """
    Derive the overall status of a probe batch.

    An empty batch counts as operational.

    Args:
        results (Iterable[ProbeResult]): Results of one batch.

    Returns:
        OverallStatus: operational if all are ok, down if none is, degraded otherwise.
    """
    oks = [r.ok for r in results]
    if all(oks):
        return OverallStatus.OPERATIONAL
    if any(oks):
        return OverallStatus.DEGRADED
    return OverallStatus.DOWN

"""Fan probes out on daemon threads and join them at a barrier.

Each probe runs on its own daemon thread and reports through a
:class:`concurrent.futures.Future`. A probe abandoned at the deadline keeps
running on its thread but does not delay interpreter exit.
"""

from __future__ import annotations

import concurrent.futures
import threading
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..exceptions import AnalysisCancelledError
from ..logging_config import get_logger
from ..models import (
    HealthCheckResult,
    HealthStatus,
    IssueSeverity,
    QualityMetrics,
    ValidationIssue,
)
from .probes import HealthProbe, ProbeContext, ProbeOutcome

logger = get_logger(__name__)

_STATUS_RANK = {HealthStatus.HEALTHY: 0, HealthStatus.DEGRADED: 1, HealthStatus.UNHEALTHY: 2}

# How often the barrier wakes up to look at the cancel event
_POLL_INTERVAL_SECONDS = 0.1


@dataclass
class HealthCollector:
    """Thread-safe sink for probe outcomes.

    Outcomes are keyed by the probe's position so the merged view does not
    depend on completion order. A component reported more than once keeps
    its worst status.
    """

    _outcomes: dict[int, list[ProbeOutcome]] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def add(self, outcome: ProbeOutcome, position: int = 0) -> None:
        with self._lock:
            self._outcomes.setdefault(position, []).append(outcome)

    def add_failure(self, component: str, description: str, suggestion: str, position: int = 0) -> None:
        self.add(
            ProbeOutcome(
                results=[HealthCheckResult(component, HealthStatus.UNHEALTHY, description)],
                issues=[
                    ValidationIssue(
                        IssueSeverity.CRITICAL,
                        component,
                        description,
                        "Component health is unknown",
                        suggestion,
                    )
                ],
            ),
            position,
        )

    def _ordered(self) -> list[ProbeOutcome]:
        with self._lock:
            return [o for position in sorted(self._outcomes) for o in self._outcomes[position]]

    @property
    def component_health(self) -> dict[str, HealthStatus]:
        health: dict[str, HealthStatus] = {}
        for outcome in self._ordered():
            for result in outcome.results:
                current = health.get(result.component)
                if current is None or _STATUS_RANK[result.status] > _STATUS_RANK[current]:
                    health[result.component] = result.status
        return health

    @property
    def issues(self) -> list[ValidationIssue]:
        return [issue for outcome in self._ordered() for issue in outcome.issues]

    @property
    def metrics(self) -> Optional[QualityMetrics]:
        found = [o.metrics for o in self._ordered() if o.metrics is not None]
        return found[-1] if found else None


class ProbeRunner:
    """Runs every probe concurrently and waits for all of them.

    Args:
        max_workers: Most probes allowed to run at once; None runs all together
    """

    def __init__(self, max_workers: Optional[int] = None) -> None:
        self.max_workers = max_workers

    def run(
        self,
        probes: Sequence[HealthProbe],
        context: ProbeContext,
        deadline: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> HealthCollector:
        """Execute ``probes`` and return their merged outcomes.

        Args:
            probes: Probes to run
            context: Shared, read-only probe context
            deadline: Seconds from now after which unfinished probes are
                recorded as timed out and abandoned
            cancel: Event that aborts the run when set

        Raises:
            AnalysisCancelledError: If ``cancel`` is set before all probes finish
        """
        collector = HealthCollector()
        if not probes:
            return collector

        started = time.monotonic()
        slots = threading.BoundedSemaphore(self.max_workers) if self.max_workers else None
        pending: dict[concurrent.futures.Future, tuple[int, HealthProbe]] = {}
        for position, probe in enumerate(probes):
            future = concurrent.futures.Future()
            threading.Thread(
                target=_run_probe,
                args=(probe, context, future, slots),
                name=f"probe-{probe.component}",
                daemon=True,
            ).start()
            pending[future] = (position, probe)

        try:
            while pending:
                if cancel is not None and cancel.is_set():
                    names = sorted(probe.component for _, probe in pending.values())
                    logger.warning("Analysis cancelled with %d probes outstanding", len(names))
                    raise AnalysisCancelledError(pending=names)

                timeout = _POLL_INTERVAL_SECONDS
                if deadline is not None:
                    remaining = deadline - (time.monotonic() - started)
                    if remaining <= 0:
                        for position, probe in pending.values():
                            logger.warning("Probe %s timed out after %.1fs", probe.component, deadline)
                            collector.add_failure(
                                probe.component,
                                f"Health check timeout after {deadline:g}s",
                                "Check component responsiveness or raise probe_timeout_seconds",
                                position,
                            )
                        break
                    timeout = min(timeout, remaining)

                done, _ = concurrent.futures.wait(
                    pending, timeout=timeout, return_when=concurrent.futures.FIRST_COMPLETED
                )
                for future in done:
                    position, probe = pending.pop(future)
                    self._collect(future, probe, position, collector)
        finally:
            # Probes still waiting for a slot never start
            for future in pending:
                future.cancel()

        return collector

    @staticmethod
    def _collect(
        future: concurrent.futures.Future,
        probe: HealthProbe,
        position: int,
        collector: HealthCollector,
    ) -> None:
        try:
            outcome = future.result()
        except Exception as e:
            logger.warning("Probe %s failed: %s", probe.component, e)
            collector.add_failure(
                probe.component,
                f"Health check failed: {e}",
                f"Investigate {probe.component} and re-run the health check",
                position,
            )
            return
        logger.debug("Probe %s completed", probe.component)
        collector.add(outcome, position)


def _run_probe(
    probe: HealthProbe,
    context: ProbeContext,
    future: concurrent.futures.Future,
    slots: Optional[threading.BoundedSemaphore],
) -> None:
    if slots is not None:
        slots.acquire()
    try:
        if not future.set_running_or_notify_cancel():
            return
        try:
            outcome = probe.check(context)
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(outcome)
    finally:
        if slots is not None:
            slots.release()

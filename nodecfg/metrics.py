"""
Prometheus metrics for the nodecfg controller.

The controller runs as a short-lived command on the node, so metrics are
exported through the node_exporter textfile collector instead of an HTTP
endpoint.

Environment Variables:
    NODECFG_METRICS_TEXTFILE: Path of the .prom file to write - default: unset (disabled)

Usage:
    from nodecfg.metrics import init_metrics, track_transition, write_metrics_textfile

    init_metrics()
    track_transition("configuring", "configured", "ok")
    write_metrics_textfile("/var/lib/node_exporter/textfile/nodecfg.prom")

Metrics are created by init_metrics(); until then the track_* helpers are
no-ops.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import REGISTRY, Counter, Histogram, write_to_textfile

logger = logging.getLogger(__name__)

TRANSITIONS_TOTAL: Optional[Counter] = None
PROVISION_OUTCOMES_TOTAL: Optional[Counter] = None
RESOLVE_DURATION: Optional[Histogram] = None

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics() -> None:
    """
    Initialize Prometheus metrics (call once at startup).

    Thread-safe via module-level lock.
    """
    global TRANSITIONS_TOTAL, PROVISION_OUTCOMES_TOTAL, RESOLVE_DURATION
    global _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        TRANSITIONS_TOTAL = Counter(
            "nodecfg_configstate_transitions_total",
            "Configuration state change requests by outcome",
            labelnames=["from_state", "to_state", "result"],
        )

        PROVISION_OUTCOMES_TOTAL = Counter(
            "nodecfg_provision_outcomes_total",
            "Auto-provisioning attempts by classified outcome",
            labelnames=["outcome"],
        )

        RESOLVE_DURATION = Histogram(
            "nodecfg_pattern_resolve_duration_seconds",
            "Duration of pattern resolution in seconds",
            buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0),
        )

        _metrics_initialized = True
        logger.info("Prometheus metrics initialized")


def write_metrics_textfile(path: Optional[str]) -> None:
    """
    Write the default registry in node_exporter textfile format.

    Args:
        path: Target .prom file (from NODECFG_METRICS_TEXTFILE env var);
            None disables export
    """
    if not path or not _metrics_initialized:
        return

    try:
        write_to_textfile(path, REGISTRY)
        logger.debug(f"Metrics written to {path}")
    except OSError as e:
        logger.error(f"Failed to write metrics textfile {path}: {e}")


@contextmanager
def track_resolve_duration() -> Generator[None, None, None]:
    """Context manager timing one pattern resolution."""
    if RESOLVE_DURATION is None:
        yield
        return

    with RESOLVE_DURATION.time():
        yield


def track_transition(from_state: str, to_state: str, result: str) -> None:
    """
    Count a configstate request.

    Args:
        result: "ok", "noop", "not_found", "invalid_input" or "systemic"
    """
    if TRANSITIONS_TOTAL is not None:
        TRANSITIONS_TOTAL.labels(from_state=from_state, to_state=to_state, result=result).inc()


def track_provision_outcome(outcome: str) -> None:
    if PROVISION_OUTCOMES_TOTAL is not None:
        PROVISION_OUTCOMES_TOTAL.labels(outcome=outcome).inc()

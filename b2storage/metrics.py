"""
Service-call metrics for the storage engine.
Tracks call counts, errors, and cumulative latency per remote method.
"""

import time
import threading
from contextlib import contextmanager
from typing import Dict, Any, Iterator

_metrics_lock = threading.Lock()
_metrics: Dict[str, Any] = {
    "last_reset": time.time(),
}


def increment_metric(name: str, value: float = 1):
    """Increment a metric counter."""
    with _metrics_lock:
        _metrics[name] = _metrics.get(name, 0) + value


def get_metric(name: str, default: Any = 0) -> Any:
    """Get a metric value."""
    with _metrics_lock:
        return _metrics.get(name, default)


def get_all_metrics() -> Dict[str, Any]:
    """Get all metrics."""
    with _metrics_lock:
        return _metrics.copy()


def reset_metrics():
    """Reset all metrics."""
    with _metrics_lock:
        _metrics.clear()
        _metrics["last_reset"] = time.time()


@contextmanager
def profiled_call(service: str, method: str) -> Iterator[None]:
    """Record one call to `service.method`, its duration, and whether it raised."""
    key = f"{service}.{method}"
    start = time.perf_counter()
    try:
        yield
    except Exception:
        increment_metric(f"{key}.errors")
        raise
    finally:
        increment_metric(f"{key}.calls")
        increment_metric(f"{key}.seconds", time.perf_counter() - start)


def export_metrics() -> Dict[str, Any]:
    """Export metrics in a format suitable for monitoring."""
    all_metrics = get_all_metrics()

    # Average latency per method
    for name in [k for k in all_metrics if k.endswith(".calls")]:
        base = name[: -len(".calls")]
        calls = all_metrics[name]
        if calls:
            all_metrics[f"{base}.avg_seconds"] = all_metrics.get(f"{base}.seconds", 0.0) / calls

    return all_metrics

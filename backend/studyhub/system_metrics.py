import threading
import time
from typing import Any


_lock = threading.Lock()
_metrics: dict[str, float] = {
    "fit_reports_computed": 0.0,
    "mind_map_layouts": 0.0,
    "mind_map_nodes_placed": 0.0,
    "catalog_rows_dropped": 0.0,
    "repo_failures": 0.0,
    "report_compute_total_ms": 0.0,
    "report_compute_samples": 0.0,
}


def increment_metric(name: str, amount: float = 1.0) -> None:
    key = str(name or "").strip()
    if not key:
        return
    with _lock:
        _metrics[key] = float(_metrics.get(key, 0.0)) + float(amount)


def observe_report_latency_ms(value_ms: float) -> None:
    latency = max(0.0, float(value_ms or 0.0))
    with _lock:
        _metrics["report_compute_total_ms"] = float(_metrics.get("report_compute_total_ms", 0.0)) + latency
        _metrics["report_compute_samples"] = float(_metrics.get("report_compute_samples", 0.0)) + 1.0


def get_metrics_snapshot(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    with _lock:
        data = dict(_metrics)

    report_samples = max(1.0, float(data.get("report_compute_samples") or 0.0))

    payload: dict[str, Any] = {
        "generated_at": time.time(),
        "fit_reports_computed": int(data.get("fit_reports_computed") or 0.0),
        "mind_map_layouts": int(data.get("mind_map_layouts") or 0.0),
        "mind_map_nodes_placed": int(data.get("mind_map_nodes_placed") or 0.0),
        "catalog_rows_dropped": int(data.get("catalog_rows_dropped") or 0.0),
        "repo_failures": int(data.get("repo_failures") or 0.0),
        "avg_report_compute_ms": round(float(data.get("report_compute_total_ms") or 0.0) / report_samples, 3),
    }

    if extra:
        payload.update(extra)
    return payload

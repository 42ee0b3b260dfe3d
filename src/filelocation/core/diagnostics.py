"""Runtime diagnostics: envelope schema, operation observer and JSONL sink.

Every storage-touching operation of a FileLocation runs inside
``observe_operation``, which publishes ``operation.start`` and
``operation.end`` envelopes on the event bus and logs a one-line summary.
"""

from __future__ import annotations

import json
import time
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from filelocation.core.config import ConfigResolver
from filelocation.core.events import OPERATION_END, OPERATION_START, get_event_bus
from filelocation.core.logging import get_logger

_logger = get_logger(__name__)

ENVELOPE_KEYS = frozenset({"event", "component", "operation", "timestamp", "data"})

# Summary keys copied into the end-of-operation log line when present.
_SUMMARY_KEYS = ("items_count", "files_count", "bytes", "found", "written")


def build_envelope(
    *,
    event: str,
    component: str,
    operation: str,
    data: dict[str, Any],
) -> dict[str, Any]:
    """Build the canonical diagnostics envelope.

    Schema:
        {
          "event": "<string>",
          "component": "<string>",
          "operation": "<string>",
          "timestamp": "<iso8601 utc>",
          "data": { ... }
        }

    Timestamp is emitted in UTC with a trailing 'Z'.
    """
    ts = datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")
    return {
        "event": event,
        "component": component,
        "operation": operation,
        "timestamp": ts,
        "data": data,
    }


def is_envelope(obj: Any) -> bool:
    if not isinstance(obj, dict) or set(obj.keys()) != ENVELOPE_KEYS:
        return False
    text_keys = ("event", "component", "operation", "timestamp")
    if not all(isinstance(obj.get(k), str) for k in text_keys):
        return False
    return isinstance(obj.get("data"), dict)


def _emit(event: str, component: str, operation: str, data: dict[str, Any]) -> None:
    envelope = build_envelope(event=event, component=component, operation=operation, data=data)
    try:
        get_event_bus().publish(event, envelope)
    except Exception:
        # Diagnostics emission must never break the observed operation.
        return


def _end_data(base: dict[str, Any], started: float, **fields: Any) -> dict[str, Any]:
    data = dict(base)
    data.update(fields)
    data["duration_ms"] = int((time.perf_counter() - started) * 1000)
    return data


def _summary_line(operation: str, data: dict[str, Any]) -> str:
    parts = [f"{operation} status={data['status']}", f"duration_ms={data['duration_ms']}"]
    parts.extend(f"{k}={data.get(k)!r}" for k in ("location", "rel_path"))
    parts.extend(f"{k}={data[k]!r}" for k in _SUMMARY_KEYS if k in data)
    if "error_type" in data:
        parts.append(f"error_type={data['error_type']!r}")
    return " ".join(parts)


@contextmanager
def observe_operation(
    *,
    component: str,
    operation: str,
    base: dict[str, Any],
) -> Iterator[dict[str, Any]]:
    """Publish start/end envelopes around an operation.

    The yielded dict is a summary the caller may fill in; its content is
    merged into the end envelope on success. Exceptions are re-raised after
    a failed end envelope is published.

    Example:
        with observe_operation(component="file_location", operation="location.read",
                               base={"location": "local", "rel_path": "a.txt"}) as summary:
            data = adapter.read("a.txt")
            summary["bytes"] = len(data)
    """
    started = time.perf_counter()
    _emit(OPERATION_START, component, operation, dict(base))

    summary: dict[str, Any] = {}
    try:
        yield summary
    except Exception as e:
        tb_tail = traceback.format_exc().strip().splitlines()[-20:]
        data = _end_data(
            base,
            started,
            status="failed",
            error_type=type(e).__name__,
            error_message=str(e),
            traceback="\n".join(tb_tail),
        )
        _emit(OPERATION_END, component, operation, data)
        _logger.warning(_summary_line(operation, data))
        raise

    data = _end_data(base, started, **{**summary, "status": "succeeded"})
    _emit(OPERATION_END, component, operation, data)
    _logger.info(_summary_line(operation, data))


_SINK_INSTALLED = False


def install_jsonl_sink(*, resolver: ConfigResolver) -> None:
    """Install the JSONL diagnostics sink subscriber.

    Idempotent: registers at most once per process. The subscriber checks
    ``diagnostics.enabled`` on every event and performs no file I/O while
    disabled. Output goes to ``diagnostics.path``.
    """
    global _SINK_INSTALLED
    if _SINK_INSTALLED:
        return

    def _on_any_event(event: str, data: dict[str, Any]) -> None:
        if not resolver.resolve_bool("diagnostics.enabled"):
            return

        raw_path = resolver.resolve_optional("diagnostics.path")
        if not raw_path:
            _logger.warning("Missing diagnostics.path; cannot write diagnostics JSONL.")
            return

        out_path = Path(str(raw_path)).expanduser()

        if is_envelope(data):
            payload = data
        else:
            payload = build_envelope(
                event=event, component="unknown", operation="unknown", data=data
            )

        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            line = json.dumps(payload, ensure_ascii=True, separators=(",", ":"), sort_keys=True)
            with out_path.open("a", encoding="utf-8") as f:
                f.write(line)
                f.write("\n")
        except OSError as e:
            _logger.warning(f"Diagnostics sink write failed: {type(e).__name__}: {e}")

    get_event_bus().subscribe(_on_any_event)
    _SINK_INSTALLED = True


"""Decode and validate probe/snapshot payloads; encode results.

Inputs may be JSON text, bytes or already-decoded Python data.  Any shape
problem is reported as :class:`MalformedInputError` and nothing partial is
returned.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from perfxray.core.errors import MalformedInputError

from .comparison import DEFAULT_THRESHOLD_PERCENT, compare_snapshots
from .flame_graph import build_flame_graph
from .models import CallRecord, MethodSnapshot, MethodStats

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(list[CallRecord])
_METHODS = TypeAdapter(dict[str, MethodStats])

_SNAPSHOT_KEYS = {"id", "name", "timestamp", "methods"}


def _decode(payload: Any, label: str) -> Any:
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            return json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedInputError(f"{label} parse error: {exc}") from exc
    return payload


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    loc = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{loc}: {first['msg']} ({exc.error_count()} error(s))"


def parse_call_records(payload: Any, label: str = "call records") -> list[CallRecord]:
    """Accept a record list, or a document carrying one under ``callStacks``/``records``."""
    data = _decode(payload, label)
    if isinstance(data, dict):
        for key in ("callStacks", "call_stacks", "records"):
            if isinstance(data.get(key), list):
                data = data[key]
                break
    try:
        return _RECORDS.validate_python(data)
    except ValidationError as exc:
        raise MalformedInputError(f"{label} parse error: {_describe(exc)}") from exc


def parse_method_snapshot(payload: Any, label: str = "snapshot") -> MethodSnapshot:
    """Accept a bare ``{methodKey: stats}`` map or a full snapshot document."""
    data = _decode(payload, label)
    if isinstance(data, dict) and _SNAPSHOT_KEYS <= data.keys() and isinstance(data["methods"], dict):
        logger.debug("Using methods of snapshot document: name=%s", data.get("name"))
        data = data["methods"]
    try:
        return _METHODS.validate_python(data)
    except ValidationError as exc:
        raise MalformedInputError(f"{label} parse error: {_describe(exc)}") from exc


def build_flame_graph_json(call_stack_json: str | bytes, *, max_records: int = 0) -> str:
    records = parse_call_records(call_stack_json)
    graph = build_flame_graph(records, max_records=max_records)
    return json.dumps(graph.to_dict())


def compare_snapshots_json(
    baseline_json: str | bytes,
    current_json: str | bytes,
    threshold: float = DEFAULT_THRESHOLD_PERCENT,
) -> str:
    baseline = parse_method_snapshot(baseline_json, label="Baseline")
    current = parse_method_snapshot(current_json, label="Current")
    results = compare_snapshots(baseline, current, threshold)
    return json.dumps([r.to_dict() for r in results])

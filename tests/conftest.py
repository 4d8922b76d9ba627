"""Shared test fixtures for all test modules."""

from pathlib import Path
from typing import Callable, Optional

import pytest

from perfxray.analysis.models import CallRecord, MethodStats


@pytest.fixture
def make_record() -> Callable[..., CallRecord]:
    """Factory for call records with sensible timing defaults."""

    def _make(
        call_id: str,
        duration: float,
        parent: Optional[str] = None,
        class_name: str = "Service",
        method_name: Optional[str] = None,
        start_time: float = 0.0,
        **extra,
    ) -> CallRecord:
        return CallRecord(
            call_id=call_id,
            class_name=class_name,
            method_name=method_name or f"method_{call_id}",
            duration=duration,
            start_time=start_time,
            end_time=start_time + duration,
            parent_call_id=parent,
            **extra,
        )

    return _make


@pytest.fixture
def stats() -> Callable[[float], MethodStats]:
    """Factory for method stats with a single execution sample."""

    def _stats(avg: float) -> MethodStats:
        return MethodStats(average_duration=avg, executions=[avg])

    return _stats


@pytest.fixture
def quiet_config(tmp_path: Path) -> str:
    """Config file that keeps INFO chatter out of CLI output."""
    path = tmp_path / "perfxray.yaml"
    path.write_text("logging:\n  level: WARNING\n", encoding="utf-8")
    return str(path)

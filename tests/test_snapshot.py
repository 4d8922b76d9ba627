"""Tests for snapshot aggregation."""

import pytest

from perfxray.analysis.comparison import compare_snapshots
from perfxray.analysis.models import DiffType, PerformanceSnapshot
from perfxray.analysis.payloads import parse_method_snapshot
from perfxray.analysis.snapshot import aggregate_calls, build_snapshot


class TestAggregateCalls:
    """Tests for per-method aggregation."""

    def test_groups_by_class_and_method(self, make_record) -> None:
        records = [
            make_record("1", 10.0, class_name="A", method_name="load"),
            make_record("2", 30.0, class_name="B", method_name="save"),
            make_record("3", 20.0, class_name="A", method_name="load", file_path="a.ts", line=3),
        ]
        methods = aggregate_calls(records)
        assert list(methods) == ["A.load", "B.save"]
        load = methods["A.load"]
        assert load.executions == [10.0, 20.0]
        assert load.average_duration == pytest.approx(15.0)
        assert load.last_duration == 20.0
        assert load.class_name == "A"
        assert load.method_name == "load"
        assert load.file_path == "a.ts"
        assert load.line == 3

    def test_empty(self) -> None:
        assert aggregate_calls([]) == {}


class TestBuildSnapshot:
    """Tests for snapshot envelopes."""

    def test_metadata(self, make_record) -> None:
        records = [
            make_record("1", 10.0, class_name="A", method_name="x", start_time=5.0),
            make_record("2", 4.0, class_name="A", method_name="x", start_time=20.0),
            make_record("3", 1.0, class_name="B", method_name="y", start_time=2.0),
        ]
        snap = build_snapshot(
            "before", records, snapshot_id="s1", timestamp=1700000000000.0, git_branch="main"
        )
        assert snap.id == "s1"
        assert snap.git_branch == "main"
        assert snap.metadata.total_methods == 2
        assert snap.metadata.total_calls == 3
        assert snap.metadata.capture_start_time == 2.0
        assert snap.metadata.capture_end_time == 24.0
        assert len(snap.call_stacks) == 3

    def test_default_id_from_timestamp(self, make_record) -> None:
        snap = build_snapshot("t", [make_record("1", 1.0)], timestamp=1234.9)
        assert snap.id == "1234"

    def test_document_round_trip_feeds_comparator(self, make_record) -> None:
        """A serialized snapshot can be fed straight back into the comparator."""
        before = build_snapshot("before", [make_record("1", 100.0, method_name="m")])
        after = build_snapshot("after", [make_record("1", 150.0, method_name="m")])

        restored = PerformanceSnapshot.model_validate(before.to_dict())
        assert restored.to_dict() == before.to_dict()

        (result,) = compare_snapshots(
            parse_method_snapshot(before.to_dict()), parse_method_snapshot(after.to_dict()), 5.0
        )
        assert result.method_key == "Service.m"
        assert result.diff_type is DiffType.REGRESSED
        assert result.percentage_change == pytest.approx(50.0)

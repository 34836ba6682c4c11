"""Tests for chapter and report aggregation."""

import pytest

from xcreport.report.aggregator import (
    aggregate_report,
    group_by_origin,
    reduce_group,
    status_from_stats,
    summarize_chapter,
)
from xcreport.report.models import (
    GroupStats,
    ReportStatus,
    TestReport,
    TestReportChapter,
    TestReportSection,
)
from xcreport.tree.models import FlatTestResult


def _result(group: str, status: str, duration: float | None = None, name: str = "t"):
    return FlatTestResult(name=name, origin_group=group, status=status, duration=duration)


def _chapter(**sections: list[FlatTestResult]) -> TestReportChapter:
    chapter = TestReportChapter(scheme_command_name="Test")
    for name, tests in sections.items():
        chapter.sections[name] = TestReportSection(name=name, tests=tests)
    return chapter


class TestGroupStats:
    def test_record_each_status(self):
        stats = GroupStats()
        for status in ["Success", "Failure", "Skipped", "Expected Failure", "ExpectedFailure"]:
            assert stats.record(status)

        assert stats == GroupStats(passed=1, failed=1, skipped=1, expected_failure=2)
        assert stats.total == 5

    def test_unknown_status_not_counted(self):
        stats = GroupStats()

        assert not stats.record("Mixed")
        assert not stats.record(None)
        assert stats.total == 0

    def test_add(self):
        total = GroupStats(passed=1, failed=2) + GroupStats(skipped=3, expected_failure=4)

        assert total.to_dict() == {
            "total": 10,
            "passed": 1,
            "failed": 2,
            "skipped": 3,
            "expected_failure": 4,
        }


class TestGroupByOrigin:
    def test_buckets_in_first_seen_order(self):
        tests = [_result("B", "Success"), _result("A", "Success"), _result("B", "Failure")]

        groups = group_by_origin(tests)

        assert list(groups) == ["B", "A"]
        assert [t.status for t in groups["B"]] == ["Success", "Failure"]

    def test_ungrouped_results_skipped(self):
        groups = group_by_origin([_result("", "Success"), _result("A", "Success")])

        assert list(groups) == ["A"]


class TestReduceGroup:
    def test_same_group_pass_and_fail(self):
        stats, _ = reduce_group([_result("ClassA", "Success"), _result("ClassA", "Failure")])

        assert stats.to_dict() == {
            "total": 2,
            "passed": 1,
            "failed": 1,
            "skipped": 0,
            "expected_failure": 0,
        }

    def test_duration_is_last_non_zero(self):
        tests = [
            _result("A", "Success", 0.5),
            _result("A", "Success", 1.25),
            _result("A", "Success", 0),
            _result("A", "Success", None),
        ]

        _, duration = reduce_group(tests)

        assert duration == 1.25

    def test_unknown_status_keeps_duration(self):
        stats, duration = reduce_group([_result("A", "Mixed", 2.0)])

        assert stats.total == 0
        assert duration == 2.0


class TestSummarizeChapter:
    def test_groups_per_section(self):
        chapter = _chapter(
            AppTests=[
                _result("LoginTests", "Success", 0.1),
                _result("LoginTests", "Failure", 0.2),
                _result("CartTests", "Skipped", 0.3),
            ],
            UITests=[_result("LaunchTests", "Expected Failure", 1.0)],
        )

        summary = summarize_chapter(chapter)

        assert set(summary.groups) == {"AppTests", "UITests"}
        assert summary.groups["AppTests"]["LoginTests"] == GroupStats(passed=1, failed=1)
        assert summary.groups["AppTests"]["CartTests"] == GroupStats(skipped=1)
        assert summary.groups["UITests"]["LaunchTests"] == GroupStats(expected_failure=1)
        assert summary.group_durations["AppTests"] == {"LoginTests": 0.2, "CartTests": 0.3}
        assert summary.total == 4
        assert summary.duration == pytest.approx(1.5)
        assert summary.formatted_duration == "1.50s"
        assert summary.has_failures

    def test_chapter_total_equals_group_totals(self):
        chapter = _chapter(
            A=[_result("X", s) for s in ["Success", "Failure", "Mixed", "Skipped"]],
            B=[_result("Y", "Success"), _result("", "Failure")],
        )

        summary = summarize_chapter(chapter)

        group_total = sum(
            stats.total for groups in summary.groups.values() for stats in groups.values()
        )
        assert summary.total == group_total == 4
        assert summary.total == (
            summary.passed + summary.failed + summary.skipped + summary.expected_failure
        )

    def test_empty_chapter(self):
        summary = summarize_chapter(_chapter())

        assert summary.total == 0
        assert summary.formatted_duration == "0.00s"
        assert not summary.has_failures


class TestStatusFromStats:
    def test_precedence(self):
        assert status_from_stats(GroupStats(passed=3, failed=1)) is ReportStatus.FAILURE
        assert status_from_stats(GroupStats(passed=3)) is ReportStatus.SUCCESS
        assert status_from_stats(GroupStats(skipped=3)) is ReportStatus.UNKNOWN


class TestAggregateReport:
    def test_pass_and_fail_in_one_group(self):
        report = TestReport(
            chapters=[_chapter(AppTests=[_result("ClassA", "Success"), _result("ClassA", "Failure")])]
        )

        aggregate_report(report)

        summary = report.chapters[0].summaries[0]
        assert summary.groups["AppTests"]["ClassA"] == GroupStats(passed=1, failed=1)
        assert report.test_status is ReportStatus.FAILURE

    def test_report_sums_chapters(self):
        report = TestReport(
            chapters=[
                _chapter(A=[_result("X", "Success", 1.0)]),
                _chapter(A=[_result("X", "Skipped", 2.0), _result("Y", "Success", 0.5)]),
            ]
        )

        aggregate_report(report)

        assert report.stats == GroupStats(passed=2, skipped=1)
        assert report.duration == pytest.approx(3.5)
        assert report.test_status is ReportStatus.SUCCESS

    def test_failure_in_earlier_chapter_sticks(self):
        report = TestReport(
            chapters=[
                _chapter(A=[_result("X", "Failure")]),
                _chapter(A=[_result("X", "Success")]),
            ]
        )

        aggregate_report(report)

        assert report.test_status is ReportStatus.FAILURE

    def test_existing_failure_never_cleared(self):
        report = TestReport(
            test_status=ReportStatus.FAILURE,
            chapters=[_chapter(A=[_result("X", "Success")])],
        )

        aggregate_report(report)

        assert report.test_status is ReportStatus.FAILURE

    def test_no_results_keeps_status(self):
        report = TestReport(chapters=[_chapter(A=[_result("X", "Skipped")])])

        aggregate_report(report)

        assert report.test_status is ReportStatus.UNKNOWN

    def test_idempotent(self):
        report = TestReport(
            chapters=[
                _chapter(A=[_result("X", "Success", 0.1), _result("Y", "Failure", 0.2)]),
                _chapter(B=[_result("Z", "Expected Failure", 0.3)]),
            ]
        )

        aggregate_report(report)
        first = ([c.summaries for c in report.chapters], report.stats, report.duration)
        aggregate_report(report)
        second = ([c.summaries for c in report.chapters], report.stats, report.duration)

        assert first == second
        assert all(len(c.summaries) == 1 for c in report.chapters)


class TestReportStatusCombine:
    def test_failure_is_sticky(self):
        assert ReportStatus.FAILURE.combine(ReportStatus.SUCCESS) is ReportStatus.FAILURE
        assert ReportStatus.FAILURE.combine(ReportStatus.UNKNOWN) is ReportStatus.FAILURE

    def test_unknown_does_not_reset(self):
        assert ReportStatus.SUCCESS.combine(ReportStatus.UNKNOWN) is ReportStatus.SUCCESS

    def test_moves_forward(self):
        assert ReportStatus.UNKNOWN.combine(ReportStatus.SUCCESS) is ReportStatus.SUCCESS
        assert ReportStatus.SUCCESS.combine(ReportStatus.FAILURE) is ReportStatus.FAILURE

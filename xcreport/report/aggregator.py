"""Roll flattened test results up into group, chapter, and report statistics."""

import logging
from collections.abc import Iterable

from ..tree.models import FlatTestResult
from .models import ChapterSummary, GroupStats, ReportStatus, TestReport, TestReportChapter

logger = logging.getLogger(__name__)


def group_by_origin(tests: Iterable[FlatTestResult]) -> dict[str, list[FlatTestResult]]:
    """Bucket results by origin group, keeping first-seen group order.

    Results without an origin group are left out.
    """
    groups: dict[str, list[FlatTestResult]] = {}
    ungrouped = 0
    for test in tests:
        if not test.origin_group:
            ungrouped += 1
            continue
        groups.setdefault(test.origin_group, []).append(test)

    if ungrouped:
        logger.debug("Skipped %d result(s) with no origin group", ungrouped)
    return groups


def reduce_group(tests: Iterable[FlatTestResult]) -> tuple[GroupStats, float]:
    """Count statuses for one group.

    Returns:
        The stats and the group duration. The duration is that of the last
        result with a non-zero duration, not a sum.
    """
    stats = GroupStats()
    duration = 0.0
    for test in tests:
        stats.record(test.status)
        if test.duration:
            duration = test.duration
    return stats, duration


def summarize_chapter(chapter: TestReportChapter) -> ChapterSummary:
    """Build a fresh ChapterSummary from a chapter's sections."""
    summary = ChapterSummary()

    for section_name, section in chapter.sections.items():
        group_stats: dict[str, GroupStats] = {}
        group_durations: dict[str, float] = {}

        for group_name, tests in group_by_origin(section.tests).items():
            stats, duration = reduce_group(tests)
            group_stats[group_name] = stats
            group_durations[group_name] = duration
            summary.stats = summary.stats + stats
            summary.duration += duration

        summary.groups[section_name] = group_stats
        summary.group_durations[section_name] = group_durations

    return summary


def status_from_stats(stats: GroupStats) -> ReportStatus:
    """Failure if anything failed, success if anything passed, else unknown."""
    if stats.failed > 0:
        return ReportStatus.FAILURE
    if stats.passed > 0:
        return ReportStatus.SUCCESS
    return ReportStatus.UNKNOWN


def aggregate_report(report: TestReport) -> TestReport:
    """Summarize every chapter and fold the results into the report.

    Each chapter's summaries are replaced, and report stats are recomputed
    from scratch, so running this twice gives the same numbers. The report
    status only moves forward: a failure already recorded (e.g. from the
    build log) is never cleared.

    Args:
        report: The report whose chapters are filled in.

    Returns:
        The same report, updated in place.
    """
    stats = GroupStats()
    duration = 0.0

    for chapter in report.chapters:
        summary = summarize_chapter(chapter)
        chapter.summaries = [summary]

        stats = stats + summary.stats
        duration += summary.duration
        report.test_status = report.test_status.combine(status_from_stats(stats))

    report.stats = stats
    report.duration = duration

    logger.debug(
        "Aggregated %d chapter(s): %d test(s), status %s",
        len(report.chapters),
        stats.total,
        report.test_status.value,
    )
    return report

"""Output formatting for test reports."""

import json
from collections.abc import Mapping
from typing import Literal

from ..report.models import (
    ChapterSummary,
    GroupStats,
    TestFailureDetail,
    TestReport,
    TestReportChapter,
    TestStatus,
)
from ..schema.options import FormatterOptions

DEFAULT_GLYPHS: dict[TestStatus, str] = {
    TestStatus.SUCCESS: "✔",
    TestStatus.FAILURE: "✘",
    TestStatus.SKIPPED: "⊘",
    TestStatus.EXPECTED_FAILURE: "⚠",
}


def format_report(
    report: TestReport,
    format: Literal["markdown", "json"] = "markdown",
    options: FormatterOptions | None = None,
    glyphs: Mapping[TestStatus, str] = DEFAULT_GLYPHS,
) -> str:
    """Format a test report for output.

    Args:
        report: The aggregated report.
        format: Output format ("markdown" or "json").
        options: Controls whether passing groups are listed.
        glyphs: Status glyphs used in Markdown tables.

    Returns:
        Formatted string representation.
    """
    options = options or FormatterOptions()
    if format == "json":
        return _format_json(report)
    return _format_markdown(report, options, glyphs)


def _format_markdown(
    report: TestReport, options: FormatterOptions, glyphs: Mapping[TestStatus, str]
) -> str:
    lines: list[str] = []

    title = report.entity_name or "Test Report"
    lines.append(f"# {title}")
    lines.append("")

    for chapter in report.chapters:
        lines.extend(_format_chapter(chapter, options, glyphs))

    if report.build_log is not None:
        lines.append("### Build Log")
        lines.append("```")
        lines.extend(report.build_log.content)
        lines.append("```")
        lines.append("")

    if report.code_coverage is not None:
        coverage = report.code_coverage.line_coverage
        if coverage is not None:
            lines.append(f"### Code Coverage: {coverage * 100:.2f}%")
            lines.append("")

    return "\n".join(lines)


def _format_chapter(
    chapter: TestReportChapter,
    options: FormatterOptions,
    glyphs: Mapping[TestStatus, str],
) -> list[str]:
    lines: list[str] = []

    heading = " ".join(
        part
        for part in (
            chapter.scheme_command_name,
            chapter.run_destination.display_name if chapter.run_destination else None,
        )
        if part
    )
    if heading:
        lines.append(f"## {heading}")
        lines.append("")

    for summary in chapter.summaries:
        lines.extend(_format_summary_table(summary, glyphs))
        lines.extend(_format_group_table(summary, options, glyphs))

    for section in chapter.sections.values():
        for detail in section.failure_details:
            lines.extend(_format_failure_detail(detail, glyphs))

    return lines


def _format_summary_table(
    summary: ChapterSummary, glyphs: Mapping[TestStatus, str]
) -> list[str]:
    failed = f"**{summary.failed}**" if summary.has_failures else str(summary.failed)
    return [
        "### Summary",
        "",
        "| Total "
        f"| {glyphs[TestStatus.SUCCESS]} Passed "
        f"| {glyphs[TestStatus.FAILURE]} Failed "
        f"| {glyphs[TestStatus.SKIPPED]} Skipped "
        f"| {glyphs[TestStatus.EXPECTED_FAILURE]} Expected Failure "
        "| Time |",
        "| ---: | ---: | ---: | ---: | ---: | ---: |",
        f"| {summary.total} | {summary.passed} | {failed} | {summary.skipped} "
        f"| {summary.expected_failure} | {summary.formatted_duration} |",
        "",
    ]


def _format_group_table(
    summary: ChapterSummary,
    options: FormatterOptions,
    glyphs: Mapping[TestStatus, str],
) -> list[str]:
    rows: list[str] = []
    for section_name, groups in summary.groups.items():
        for group_name, stats in groups.items():
            if not options.show_passed_tests and stats.passed == stats.total:
                continue
            duration = summary.group_durations[section_name][group_name]
            rows.append(
                f"| {_group_glyph(stats, glyphs)} {section_name} / {group_name} "
                f"| {stats.total} | {stats.passed} | {stats.failed} "
                f"| {stats.skipped} | {stats.expected_failure} | {duration:.2f}s |"
            )

    if not rows:
        return []

    return [
        "| Test Class | Total | Passed | Failed | Skipped | Expected Failure | Time |",
        "| --- | ---: | ---: | ---: | ---: | ---: | ---: |",
        *rows,
        "",
    ]


def _group_glyph(stats: GroupStats, glyphs: Mapping[TestStatus, str]) -> str:
    if stats.failed:
        return glyphs[TestStatus.FAILURE]
    if stats.passed:
        return glyphs[TestStatus.SUCCESS]
    if stats.expected_failure:
        return glyphs[TestStatus.EXPECTED_FAILURE]
    return glyphs[TestStatus.SKIPPED]


def _format_failure_detail(
    detail: TestFailureDetail, glyphs: Mapping[TestStatus, str]
) -> list[str]:
    test = detail.test
    lines = [f"#### {glyphs[TestStatus.FAILURE]} {test.origin_group}.{test.name}", ""]

    for failure in detail.failures:
        lines.append(failure.contents)
        if failure.stack_trace:
            lines.append("```")
            lines.extend(failure.stack_trace)
            lines.append("```")
        lines.append("")

    for activity in detail.activities:
        lines.append(f"{'  ' * activity.indent}- {activity.title}")
        for path in activity.exported_attachments:
            lines.append(f"{'  ' * (activity.indent + 1)}- [{path}]({path})")
    if detail.activities:
        lines.append("")

    return lines


def _format_json(report: TestReport) -> str:
    data = {
        "entity_name": report.entity_name,
        "creating_workspace_file_path": report.creating_workspace_file_path,
        "test_status": report.test_status.value,
        "stats": report.stats.to_dict(),
        "duration": report.duration,
        "chapters": [
            {
                "scheme_command_name": chapter.scheme_command_name,
                "run_destination": (
                    chapter.run_destination.display_name
                    if chapter.run_destination
                    else None
                ),
                "title": chapter.title,
                "summaries": [
                    {
                        **summary.stats.to_dict(),
                        "duration": summary.formatted_duration,
                        "has_failures": summary.has_failures,
                        "groups": {
                            section: {
                                group: stats.to_dict()
                                for group, stats in groups.items()
                            }
                            for section, groups in summary.groups.items()
                        },
                    }
                    for summary in chapter.summaries
                ],
                "sections": {
                    name: {
                        "tests": [
                            {
                                "name": test.name,
                                "group": test.origin_group,
                                "status": test.status,
                                "duration": test.duration,
                            }
                            for test in section.tests
                        ],
                        "failures": [
                            {
                                "test": f"{detail.test.origin_group}.{detail.test.name}",
                                "failures": [
                                    {
                                        "file_path": failure.file_path,
                                        "line_number": failure.line_number,
                                        "issue_type": failure.issue_type,
                                        "message": failure.message,
                                        "stack_trace": list(failure.stack_trace),
                                    }
                                    for failure in detail.failures
                                ],
                                "activities": [
                                    {"title": a.title, "indent": a.indent}
                                    for a in detail.activities
                                ],
                            }
                            for detail in section.failure_details
                        ],
                    }
                    for name, section in chapter.sections.items()
                },
            }
            for chapter in report.chapters
        ],
        "annotations": [
            {
                "path": a.path,
                "start_line": a.start_line,
                "end_line": a.end_line,
                "level": a.level,
                "title": a.title,
                "message": a.message,
            }
            for a in report.annotations
        ],
        "build_log": report.build_log.content if report.build_log else None,
        "code_coverage": report.code_coverage.data if report.code_coverage else None,
    }
    return json.dumps(data, indent=2)

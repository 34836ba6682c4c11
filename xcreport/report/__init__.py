"""Report layer: aggregation, build logs, and the report pipeline."""

from .aggregator import (
    aggregate_report,
    group_by_origin,
    reduce_group,
    status_from_stats,
    summarize_chapter,
)
from .build_log import apply_build_log, extract_build_log, parse_location_url
from .formatter import Formatter
from .models import (
    Annotation,
    BuildLog,
    ChapterSummary,
    GroupStats,
    ReportStatus,
    TestCodeCoverage,
    TestFailureDetail,
    TestReport,
    TestReportChapter,
    TestReportSection,
    TestStatus,
)

__all__ = [
    "aggregate_report",
    "group_by_origin",
    "reduce_group",
    "status_from_stats",
    "summarize_chapter",
    "apply_build_log",
    "extract_build_log",
    "parse_location_url",
    "Formatter",
    "Annotation",
    "BuildLog",
    "ChapterSummary",
    "GroupStats",
    "ReportStatus",
    "TestCodeCoverage",
    "TestFailureDetail",
    "TestReport",
    "TestReportChapter",
    "TestReportSection",
    "TestStatus",
]

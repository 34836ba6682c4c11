"""Data model of a generated test report."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..schema.records import RunDestination, TestableSummary
from ..tree.models import FailureSummary, FlatActivity, FlatTestResult


class TestStatus(str, Enum):
    """Recognized statuses of a single test."""

    __test__ = False

    SUCCESS = "Success"
    FAILURE = "Failure"
    SKIPPED = "Skipped"
    EXPECTED_FAILURE = "Expected Failure"

    @classmethod
    def parse(cls, raw: str | None) -> "TestStatus | None":
        """Return the matching status, or None for anything unrecognized."""
        if raw == "ExpectedFailure":
            return cls.EXPECTED_FAILURE
        try:
            return cls(raw)
        except ValueError:
            return None


class ReportStatus(str, Enum):
    """Overall status of a report."""

    UNKNOWN = "unknown"
    SUCCESS = "success"
    FAILURE = "failure"

    def combine(self, other: "ReportStatus") -> "ReportStatus":
        """Fold a newer status into this one. Failure is sticky."""
        if self is ReportStatus.FAILURE or other is ReportStatus.UNKNOWN:
            return self
        return other


@dataclass
class GroupStats:
    """Per-status test counts."""

    passed: int = 0
    failed: int = 0
    skipped: int = 0
    expected_failure: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.skipped + self.expected_failure

    def record(self, status: str | None) -> bool:
        """Count one test. Returns False if the status is not recognized."""
        parsed = TestStatus.parse(status)
        if parsed is TestStatus.SUCCESS:
            self.passed += 1
        elif parsed is TestStatus.FAILURE:
            self.failed += 1
        elif parsed is TestStatus.SKIPPED:
            self.skipped += 1
        elif parsed is TestStatus.EXPECTED_FAILURE:
            self.expected_failure += 1
        else:
            return False
        return True

    def __add__(self, other: "GroupStats") -> "GroupStats":
        return GroupStats(
            passed=self.passed + other.passed,
            failed=self.failed + other.failed,
            skipped=self.skipped + other.skipped,
            expected_failure=self.expected_failure + other.expected_failure,
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "expected_failure": self.expected_failure,
        }


@dataclass
class ChapterSummary:
    """Aggregated statistics for one chapter."""

    # section name -> group name -> stats
    groups: dict[str, dict[str, GroupStats]] = field(default_factory=dict)
    group_durations: dict[str, dict[str, float]] = field(default_factory=dict)
    stats: GroupStats = field(default_factory=GroupStats)
    duration: float = 0.0

    @property
    def total(self) -> int:
        return self.stats.total

    @property
    def passed(self) -> int:
        return self.stats.passed

    @property
    def failed(self) -> int:
        return self.stats.failed

    @property
    def skipped(self) -> int:
        return self.stats.skipped

    @property
    def expected_failure(self) -> int:
        return self.stats.expected_failure

    @property
    def has_failures(self) -> bool:
        return self.stats.failed > 0

    @property
    def formatted_duration(self) -> str:
        return f"{self.duration:.2f}s"


@dataclass
class Annotation:
    """An inline diagnostic pointing at a source location."""

    path: str
    start_line: int
    end_line: int
    level: str  # "failure" or "warning"
    title: str
    message: str


@dataclass
class BuildLog:
    """Diagnostics extracted from a build log."""

    content: list[str] = field(default_factory=list)
    annotations: list[Annotation] = field(default_factory=list)


@dataclass
class TestCodeCoverage:
    """Decoded code-coverage summary, kept as given."""

    __test__ = False

    data: Any

    @property
    def line_coverage(self) -> float | None:
        if isinstance(self.data, dict):
            value = self.data.get("lineCoverage")
            if isinstance(value, (int, float)):
                return float(value)
        return None


@dataclass
class TestFailureDetail:
    """Failures and activity log of one failed test."""

    __test__ = False

    test: FlatTestResult
    failures: list[FailureSummary] = field(default_factory=list)
    activities: list[FlatActivity] = field(default_factory=list)


@dataclass
class TestReportSection:
    """Results for one testable target within a chapter."""

    __test__ = False

    name: str
    summary: TestableSummary | None = None
    tests: list[FlatTestResult] = field(default_factory=list)
    failure_details: list[TestFailureDetail] = field(default_factory=list)


@dataclass
class TestReportChapter:
    """Results of one build action against one run destination."""

    __test__ = False

    scheme_command_name: str | None = None
    run_destination: RunDestination | None = None
    title: str | None = None
    sections: dict[str, TestReportSection] = field(default_factory=dict)
    summaries: list[ChapterSummary] = field(default_factory=list)


@dataclass
class TestReport:
    """The complete report handed to a renderer."""

    __test__ = False

    entity_name: str | None = None
    creating_workspace_file_path: str | None = None
    test_status: ReportStatus = ReportStatus.UNKNOWN
    build_log: BuildLog | None = None
    annotations: list[Annotation] = field(default_factory=list)
    chapters: list[TestReportChapter] = field(default_factory=list)
    code_coverage: TestCodeCoverage | None = None
    stats: GroupStats = field(default_factory=GroupStats)
    duration: float = 0.0

    @property
    def has_failures(self) -> bool:
        return self.test_status is ReportStatus.FAILURE

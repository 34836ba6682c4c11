"""Flattened, immutable views of the test and activity trees."""

from dataclasses import dataclass

from ..schema.records import Attachment


@dataclass(frozen=True)
class FailureSummary:
    """A display-ready test failure."""

    file_path: str
    line_number: int | None
    issue_type: str
    message: str
    location: str  # file:line, file, or empty
    contents: str  # File / Issue Type / Message table
    stack_trace: tuple[str, ...] = ()


@dataclass(frozen=True)
class FlatTestResult:
    """A leaf test result tagged with the name of its immediate parent group."""

    name: str
    origin_group: str
    status: str  # raw status string, kept even when unrecognized
    identifier: str | None = None
    duration: float | None = None
    summary_ref: str | None = None
    failures: tuple[FailureSummary, ...] = ()


@dataclass(frozen=True)
class FlatActivity:
    """An activity-log step with its nesting depth."""

    title: str
    indent: int
    activity_type: str | None = None
    uuid: str | None = None
    start: str | None = None
    finish: str | None = None
    attachments: tuple[Attachment, ...] = ()
    exported_attachments: tuple[str, ...] = ()

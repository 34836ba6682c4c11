"""Tree layer: flattening test and activity trees, failure summaries."""

from .attachments import AttachmentExporter
from .failures import build_failure_summaries, build_failure_summary, format_stack_frame
from .flatten import flatten_activities, flatten_tests
from .models import FailureSummary, FlatActivity, FlatTestResult

__all__ = [
    "AttachmentExporter",
    "build_failure_summaries",
    "build_failure_summary",
    "format_stack_frame",
    "flatten_activities",
    "flatten_tests",
    "FailureSummary",
    "FlatActivity",
    "FlatTestResult",
]

"""Turn raw failure records into display-ready summaries."""

from ..schema.records import CallStackFrame, FailureRecord
from .models import FailureSummary

TITLE_ATTR = 'align="right" width="100px"'
DETAIL_ATTR = 'width="668px"'


def build_failure_summaries(failures: list[FailureRecord]) -> list[FailureSummary]:
    """Map raw failure records to FailureSummary values, one per record, in order.

    Args:
        failures: Raw failure records from a test leaf or test summary.

    Returns:
        List of FailureSummary objects.
    """
    return [build_failure_summary(failure) for failure in failures]


def build_failure_summary(failure: FailureRecord) -> FailureSummary:
    """Build a single FailureSummary.

    The source-context location wins over the record's own file name and
    line number.
    """
    file_name = failure.file_name or ""
    context = failure.source_code_context
    location = context.location if context else None

    file_path = (location.file_path if location else None) or file_name
    line_number = location.line_number if location else None
    if line_number is None:
        line_number = failure.line_number

    if file_path and line_number is not None:
        file_location = f"{file_path}:{line_number}"
    else:
        file_location = file_path

    issue_type = failure.issue_type or ""
    message = failure.message or ""

    contents = (
        "<table>"
        f"<tr><td {TITLE_ATTR}><b>File</b><td {DETAIL_ATTR}>{file_location}"
        f"<tr><td {TITLE_ATTR}><b>Issue Type</b><td {DETAIL_ATTR}>{issue_type}"
        f"<tr><td {TITLE_ATTR}><b>Message</b><td {DETAIL_ATTR}>{message}"
        "</table>\n"
    )

    call_stack = context.call_stack if context else []
    stack_trace = tuple(
        format_stack_frame(index, frame, file_name)
        for index, frame in enumerate(call_stack)
    )

    return FailureSummary(
        file_path=file_path,
        line_number=line_number,
        issue_type=issue_type,
        message=message,
        location=file_location,
        contents=contents,
        stack_trace=stack_trace,
    )


def format_stack_frame(index: int, frame: CallStackFrame, file_name: str = "") -> str:
    """Format one call-stack frame as `index image address symbol path: line`."""
    symbol_info = frame.symbol_info
    image_name = (symbol_info.image_name if symbol_info else None) or ""
    symbol_name = (symbol_info.symbol_name if symbol_info else None) or ""
    location = symbol_info.location if symbol_info else None
    file_path = (location.file_path if location else None) or file_name
    line_number = location.line_number if location else None
    address = frame.address_string or ""
    line = "" if line_number is None else line_number

    return f"{index:<2} {image_name} {address} {symbol_name} {file_path}: {line}"

"""Build log extraction and its effect on the report."""

import logging
from pathlib import Path
from urllib.parse import parse_qs, unquote, urlparse

from ..schema.records import ActivityLogMessage, ActivityLogSection
from .models import Annotation, BuildLog, ReportStatus, TestReport

logger = logging.getLogger(__name__)

ANNOTATION_LEVELS = {
    "error": "failure",
    "warning": "warning",
}


def extract_build_log(
    log: ActivityLogSection, workspace_path: str | None = None
) -> BuildLog:
    """Collect error and warning messages from a build log tree.

    Sections are visited in pre-order. Errors go into `content` and become
    failure annotations; warnings only become annotations.

    Args:
        log: The root log section.
        workspace_path: The workspace file the build ran from. Paths under its
            directory are made relative.

    Returns:
        The extracted BuildLog.
    """
    build_log = BuildLog()
    root = Path(workspace_path).parent if workspace_path else None

    stack = [log]
    while stack:
        section = stack.pop()
        for message in section.messages:
            level = ANNOTATION_LEVELS.get((message.type or "").lower())
            if level is None:
                continue

            annotation = _annotation(message, level, root)
            build_log.annotations.append(annotation)
            if level == "failure":
                build_log.content.append(_content_line(annotation))

        stack.extend(reversed(section.subsections))

    return build_log


def _annotation(message: ActivityLogMessage, level: str, root: Path | None) -> Annotation:
    path, start_line, end_line = "", 0, 0
    url = message.location.url if message.location else None
    if url:
        path, start_line, end_line = parse_location_url(url)
        if root is not None:
            path = _relative_to(path, root)

    return Annotation(
        path=path,
        start_line=start_line,
        end_line=end_line,
        level=level,
        title=message.short_title or message.title or "",
        message=message.title or "",
    )


def parse_location_url(url: str) -> tuple[str, int, int]:
    """Split a document location URL into path and one-based line range.

    e.g. `file:///src/App.swift#EndingLineNumber=9&StartingLineNumber=9`
    gives `("/src/App.swift", 10, 10)`.
    """
    parsed = urlparse(url)
    path = unquote(parsed.path)
    fragment = parse_qs(parsed.fragment)

    start_line = _line_number(fragment.get("StartingLineNumber"))
    end_line = _line_number(fragment.get("EndingLineNumber")) or start_line
    return path, start_line, end_line


def _line_number(values: list[str] | None) -> int:
    if not values:
        return 0
    try:
        return int(values[0]) + 1
    except ValueError:
        return 0


def _relative_to(path: str, root: Path) -> str:
    try:
        return str(Path(path).relative_to(root))
    except ValueError:
        return path


def _content_line(annotation: Annotation) -> str:
    if annotation.path:
        return f"{annotation.path}:{annotation.start_line}: error: {annotation.message}"
    return f"error: {annotation.message}"


def apply_build_log(report: TestReport, build_log: BuildLog) -> bool:
    """Record a build log on the report if it holds any content.

    A non-empty log marks the report as failed and appends its annotations in
    order. An empty log leaves the report untouched.

    Returns:
        True if the log was applied.
    """
    if not build_log.content:
        return False

    report.build_log = build_log
    report.test_status = report.test_status.combine(ReportStatus.FAILURE)
    report.annotations.extend(build_log.annotations)
    logger.debug("Build log has %d error line(s)", len(build_log.content))
    return True

"""Flatten the nested test and activity trees into ordered lists.

Both walks are pre-order and use an explicit stack of iterators, so tree
depth is bounded only by memory.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator
from typing import Protocol

from ..schema.records import ActivitySummary, TestGroup, TestLeaf, TestNode
from .failures import build_failure_summaries
from .models import FlatActivity, FlatTestResult

logger = logging.getLogger(__name__)

AttachmentExport = Callable[[ActivitySummary], Awaitable[Iterable[str]]]


class NamedGroup(Protocol):
    name: str | None


def flatten_tests(
    group: NamedGroup,
    tests: Iterable[TestNode],
    out: list[FlatTestResult] | None = None,
) -> list[FlatTestResult]:
    """Collect every leaf under `group`, tagged with its immediate parent's name.

    Args:
        group: The group (or testable summary) that owns `tests`.
        tests: Its direct children.
        out: Optional list to append to.

    Returns:
        The list the leaves were appended to.
    """
    if out is None:
        out = []

    stack: list[tuple[str, Iterator[TestNode]]] = [(group.name or "", iter(tests))]
    while stack:
        group_name, children = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            continue

        if isinstance(child, TestGroup):
            stack.append((child.name or "", iter(child.subtests)))
        else:
            out.append(_flat_result(child, group_name))

    return out


def _flat_result(leaf: TestLeaf, group_name: str) -> FlatTestResult:
    return FlatTestResult(
        name=leaf.name or "",
        origin_group=group_name,
        status=leaf.test_status or "",
        identifier=leaf.identifier,
        duration=leaf.duration,
        summary_ref=leaf.summary_ref.id if leaf.summary_ref else None,
        failures=tuple(build_failure_summaries(leaf.failure_summaries)),
    )


async def flatten_activities(
    activities: Iterable[ActivitySummary],
    out: list[FlatActivity] | None = None,
    indent: int = 0,
    export_attachments: AttachmentExport | None = None,
) -> list[FlatActivity]:
    """Collect an activity forest in pre-order with each node's nesting depth.

    Attachments are exported per node before it is appended. An export that
    raises is logged and leaves that node without exported attachments; the
    walk carries on.

    Args:
        activities: The root activities.
        out: Optional list to append to.
        indent: Depth assigned to the roots.
        export_attachments: Optional coroutine function run once per node.

    Returns:
        The list the activities were appended to.
    """
    if out is None:
        out = []

    stack: list[tuple[int, Iterator[ActivitySummary]]] = [(indent, iter(activities))]
    while stack:
        depth, siblings = stack[-1]
        activity = next(siblings, None)
        if activity is None:
            stack.pop()
            continue

        exported: tuple[str, ...] = ()
        if export_attachments is not None:
            try:
                exported = tuple(await export_attachments(activity))
            except Exception as e:
                logger.warning(
                    "Attachment export failed for activity %r: %s", activity.title, e
                )

        out.append(
            FlatActivity(
                title=activity.title or "",
                indent=depth,
                activity_type=activity.activity_type,
                uuid=activity.uuid,
                start=activity.start,
                finish=activity.finish,
                attachments=tuple(activity.attachments),
                exported_attachments=exported,
            )
        )

        if activity.subactivities:
            stack.append((depth + 1, iter(activity.subactivities)))

    return out

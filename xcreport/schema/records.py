"""Pydantic models for the records a result bundle is made of."""

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base for all bundle records: camelCase keys, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Reference(Record):
    """An opaque pointer to another record in the bundle."""

    id: str
    target_type: Any = None


class DocumentLocation(Record):
    url: str | None = None
    concrete_type_name: str | None = None


class SourceLocation(Record):
    file_path: str | None = None
    line_number: int | None = None


class SymbolInfo(Record):
    image_name: str | None = None
    symbol_name: str | None = None
    location: SourceLocation | None = None


class CallStackFrame(Record):
    address_string: str | None = None
    symbol_info: SymbolInfo | None = None


class SourceCodeContext(Record):
    location: SourceLocation | None = None
    call_stack: list[CallStackFrame] = Field(default_factory=list)


class FailureRecord(Record):
    """A raw test failure as recorded by the test runner."""

    file_name: str | None = None
    line_number: int | None = None
    issue_type: str | None = None
    message: str | None = None
    uuid: str | None = None
    source_code_context: SourceCodeContext | None = None


class Attachment(Record):
    name: str | None = None
    filename: str | None = None
    uniform_type_identifier: str | None = None
    payload_ref: Reference | None = None
    payload_size: int | None = None


class ActivitySummary(Record):
    """One step of a test's activity log, possibly with nested steps."""

    title: str | None = None
    activity_type: str | None = None
    uuid: str | None = None
    start: str | None = None
    finish: str | None = None
    attachments: list[Attachment] = Field(default_factory=list)
    subactivities: list["ActivitySummary"] = Field(default_factory=list)
    failure_summary_ids: list[str] = Field(
        default_factory=list, alias="failureSummaryIDs"
    )


class TestLeaf(Record):
    """A single test case in the result tree."""

    __test__ = False

    name: str | None = None
    identifier: str | None = None
    identifier_url: str | None = Field(default=None, alias="identifierURL")
    test_status: str | None = None
    duration: float | None = None
    summary_ref: Reference | None = None
    failure_summaries: list[FailureRecord] = Field(default_factory=list)


class TestGroup(Record):
    """A test class or suite holding further groups or leaves."""

    __test__ = False

    name: str | None = None
    identifier: str | None = None
    duration: float | None = None
    subtests: list["TestNode"] = Field(default_factory=list)


def _node_kind(value: Any) -> str:
    """Tell groups from leaves by the presence of a subtests key."""
    if isinstance(value, dict):
        return "group" if "subtests" in value else "leaf"
    return "group" if isinstance(value, TestGroup) else "leaf"


TestNode = Annotated[
    Union[
        Annotated[TestGroup, Tag("group")],
        Annotated[TestLeaf, Tag("leaf")],
    ],
    Discriminator(_node_kind),
]

TestGroup.model_rebuild()


class TestableSummary(Record):
    """Results for one testable target."""

    __test__ = False

    name: str | None = None
    identifier_url: str | None = Field(default=None, alias="identifierURL")
    project_relative_path: str | None = None
    target_name: str | None = None
    test_kind: str | None = None
    tests: list[TestNode] = Field(default_factory=list)


class TestPlanRunSummary(Record):
    __test__ = False

    name: str | None = None
    testable_summaries: list[TestableSummary] = Field(default_factory=list)


class TestPlanRunSummaries(Record):
    __test__ = False

    summaries: list[TestPlanRunSummary] = Field(default_factory=list)


class TestSummary(Record):
    """Detailed record for one test, reached through a leaf's summaryRef."""

    __test__ = False

    name: str | None = None
    identifier: str | None = None
    test_status: str | None = None
    duration: float | None = None
    activity_summaries: list[ActivitySummary] = Field(default_factory=list)
    failure_summaries: list[FailureRecord] = Field(default_factory=list)


class ActivityLogMessage(Record):
    type: str | None = None
    title: str | None = None
    short_title: str | None = None
    category: str | None = None
    location: DocumentLocation | None = None


class ActivityLogSection(Record):
    """A section of the build log, possibly with nested subsections."""

    domain_type: str | None = None
    title: str | None = None
    result: str | None = None
    subsections: list["ActivityLogSection"] = Field(default_factory=list)
    messages: list[ActivityLogMessage] = Field(default_factory=list)


class RunDestination(Record):
    display_name: str | None = None
    target_architecture: str | None = None


class BuildResult(Record):
    log_ref: Reference | None = None


class ActionResult(Record):
    tests_ref: Reference | None = None
    coverage: Any = None


class ActionRecord(Record):
    """One build action (build, test, ...) against a run destination."""

    scheme_command_name: str | None = None
    title: str | None = None
    run_destination: RunDestination | None = None
    build_result: BuildResult | None = None
    action_result: ActionResult | None = None


class SchemeIdentifier(Record):
    entity_name: str | None = None


class InvocationMetadata(Record):
    creating_workspace_file_path: str | None = None
    scheme_identifier: SchemeIdentifier | None = None


class InvocationRecord(Record):
    """Root record of a result bundle."""

    metadata_ref: Reference | None = None
    actions: list[ActionRecord] = Field(default_factory=list)


ActivitySummary.model_rebuild()
ActivityLogSection.model_rebuild()

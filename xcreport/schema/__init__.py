"""Schema layer: bundle records, loading, and reference resolution."""

from .errors import RecordLoadError, RecordValidationError, ReferenceResolutionError
from .records import (
    ActionRecord,
    ActivityLogMessage,
    ActivityLogSection,
    ActivitySummary,
    Attachment,
    FailureRecord,
    InvocationMetadata,
    InvocationRecord,
    Reference,
    TestableSummary,
    TestGroup,
    TestLeaf,
    TestNode,
    TestPlanRunSummaries,
    TestSummary,
)
from .loader import load_json, parse_record, unwrap_typed_json
from .options import FormatterOptions, load_options
from .resolver import BundleResolver, RecordResolver

__all__ = [
    "RecordLoadError",
    "RecordValidationError",
    "ReferenceResolutionError",
    "ActionRecord",
    "ActivityLogMessage",
    "ActivityLogSection",
    "ActivitySummary",
    "Attachment",
    "FailureRecord",
    "InvocationMetadata",
    "InvocationRecord",
    "Reference",
    "TestableSummary",
    "TestGroup",
    "TestLeaf",
    "TestNode",
    "TestPlanRunSummaries",
    "TestSummary",
    "load_json",
    "parse_record",
    "unwrap_typed_json",
    "FormatterOptions",
    "load_options",
    "BundleResolver",
    "RecordResolver",
]

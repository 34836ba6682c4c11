"""Build a TestReport from a result bundle."""

import logging

from ..schema.errors import (
    RecordLoadError,
    RecordValidationError,
    ReferenceResolutionError,
)
from ..schema.loader import parse_record
from ..schema.options import FormatterOptions
from ..schema.records import (
    ActionRecord,
    ActivityLogSection,
    InvocationMetadata,
    InvocationRecord,
    TestPlanRunSummaries,
    TestSummary,
)
from ..schema.resolver import RecordResolver
from ..tree.attachments import AttachmentExporter
from ..tree.failures import build_failure_summaries
from ..tree.flatten import flatten_activities, flatten_tests
from .aggregator import aggregate_report
from .build_log import apply_build_log, extract_build_log
from .models import (
    TestCodeCoverage,
    TestFailureDetail,
    TestReport,
    TestReportChapter,
    TestReportSection,
    TestStatus,
)

logger = logging.getLogger(__name__)


class Formatter:
    """Turns the records behind a resolver into a TestReport.

    Required records (root, metadata, build log, test plan summaries) are not
    caught: if one cannot be resolved the error reaches the caller. A failed
    test whose summary record is missing or invalid loses its failure detail
    only. Code coverage is optional and dropped on any failure.
    """

    def __init__(self, resolver: RecordResolver):
        self.resolver = resolver

    async def format(self, options: FormatterOptions | None = None) -> TestReport:
        """Build the report.

        Args:
            options: What to include; defaults to everything.

        Returns:
            The aggregated TestReport.
        """
        options = options or FormatterOptions()
        record = parse_record(InvocationRecord, await self.resolver.resolve())
        report = TestReport()
        exporter = None
        if options.show_failure_details and options.attachments_dir is not None:
            exporter = AttachmentExporter(self.resolver, options.attachments_dir)

        if record.metadata_ref:
            metadata = parse_record(
                InvocationMetadata, await self.resolver.resolve(record.metadata_ref.id)
            )
            report.creating_workspace_file_path = metadata.creating_workspace_file_path
            if metadata.scheme_identifier:
                report.entity_name = metadata.scheme_identifier.entity_name

        for action in record.actions:
            await self._add_build_log(report, action)
            await self._add_tests(report, action, options, exporter)

        return aggregate_report(report)

    async def _add_build_log(self, report: TestReport, action: ActionRecord) -> None:
        if not (action.build_result and action.build_result.log_ref):
            return

        log = parse_record(
            ActivityLogSection,
            await self.resolver.resolve(action.build_result.log_ref.id),
        )
        apply_build_log(
            report, extract_build_log(log, report.creating_workspace_file_path)
        )

    async def _add_tests(
        self,
        report: TestReport,
        action: ActionRecord,
        options: FormatterOptions,
        exporter: AttachmentExporter | None = None,
    ) -> None:
        result = action.action_result
        if not (result and result.tests_ref):
            return

        chapter = TestReportChapter(
            scheme_command_name=action.scheme_command_name,
            run_destination=action.run_destination,
            title=action.title,
        )
        report.chapters.append(chapter)

        plan = parse_record(
            TestPlanRunSummaries, await self.resolver.resolve(result.tests_ref.id)
        )
        for summary in plan.summaries:
            for testable in summary.testable_summaries:
                tests = flatten_tests(testable, testable.tests)
                if not testable.name:
                    logger.debug("Dropping %d result(s) of an unnamed testable", len(tests))
                    continue

                section = TestReportSection(
                    name=testable.name, summary=testable, tests=tests
                )
                if options.show_failure_details:
                    await self._add_failure_details(section, exporter)
                chapter.sections[testable.name] = section

        if result.coverage is not None and options.show_code_coverage:
            report.code_coverage = await self._code_coverage()

    async def _add_failure_details(
        self, section: TestReportSection, exporter: AttachmentExporter | None
    ) -> None:
        for test in section.tests:
            if TestStatus.parse(test.status) is not TestStatus.FAILURE:
                continue
            if test.summary_ref is None:
                continue

            try:
                summary = parse_record(
                    TestSummary, await self.resolver.resolve(test.summary_ref)
                )
            except (
                ReferenceResolutionError,
                RecordLoadError,
                RecordValidationError,
            ) as e:
                logger.warning(
                    "Skipping failure detail of %s: %s", test.identifier or test.name, e
                )
                continue

            section.failure_details.append(
                TestFailureDetail(
                    test=test,
                    failures=build_failure_summaries(summary.failure_summaries),
                    activities=await flatten_activities(
                        summary.activity_summaries, export_attachments=exporter
                    ),
                )
            )

    async def _code_coverage(self) -> TestCodeCoverage | None:
        try:
            return TestCodeCoverage(await self.resolver.export_code_coverage())
        except Exception as e:
            logger.warning("Code coverage unavailable: %s", e)
            return None

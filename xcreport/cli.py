"""Command-line interface for xcreport."""

import asyncio
import logging
import sys

import click

from .output.formatter import format_report
from .report.formatter import Formatter
from .report.models import ReportStatus
from .schema.errors import RecordLoadError, RecordValidationError, ReferenceResolutionError
from .schema.options import load_options
from .schema.resolver import BundleResolver


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.version_option(package_name="xcreport")
def main():
    """xcreport: summarize exported test result bundles."""
    pass


@main.command()
@click.argument("bundle_dir", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["markdown", "json"]),
    default="markdown",
    help="Output format",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with formatter options",
)
@click.option(
    "--show-passed/--hide-passed",
    "show_passed_tests",
    default=None,
    help="List test classes whose tests all passed",
)
@click.option(
    "--coverage/--no-coverage",
    "show_code_coverage",
    default=None,
    help="Include code coverage when the bundle has it",
)
@click.option(
    "--details/--no-details",
    "show_failure_details",
    default=None,
    help="Resolve failure details and activity logs of failed tests",
)
@click.option(
    "--attachments-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to export activity attachments into",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging")
def summarize(
    bundle_dir: str,
    output_format: str,
    config_file: str | None,
    show_passed_tests: bool | None,
    show_code_coverage: bool | None,
    show_failure_details: bool | None,
    attachments_dir: str | None,
    verbose: bool,
):
    """Summarize an exported result bundle.

    BUNDLE_DIR is a directory holding root.json and the records it references.

    Exit codes:
      0 - Tests passed (or no tests ran)
      1 - Tests or build failed
      2 - Bundle, record, or config error
    """
    _configure_logging(verbose)

    try:
        options = load_options(
            config_file,
            show_passed_tests=show_passed_tests,
            show_code_coverage=show_code_coverage,
            show_failure_details=show_failure_details,
            attachments_dir=attachments_dir,
        )
        report = asyncio.run(Formatter(BundleResolver(bundle_dir)).format(options))
    except (RecordLoadError, ReferenceResolutionError) as e:
        click.echo(f"Error loading bundle: {e}", err=True)
        sys.exit(2)
    except RecordValidationError as e:
        click.echo(f"Record validation error: {e}", err=True)
        for err in e.errors:
            click.echo(f"  - {err['loc']}: {err['msg']}", err=True)
        sys.exit(2)

    output = format_report(report, output_format, options)  # type: ignore
    click.echo(output)

    if report.test_status is ReportStatus.FAILURE:
        sys.exit(1)
    else:
        sys.exit(0)


if __name__ == "__main__":
    main()

"""Formatter options and their YAML config file."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict

from .errors import RecordLoadError
from .loader import parse_record


class FormatterOptions(BaseModel):
    """Options controlling what goes into a report."""

    model_config = ConfigDict(extra="forbid")

    show_passed_tests: bool = True
    show_code_coverage: bool = True
    show_failure_details: bool = True
    attachments_dir: Path | None = None


def _read_options_file(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RecordLoadError(f"Invalid YAML in options file: {e}", str(path)) from e
    except OSError as e:
        raise RecordLoadError(f"Cannot read options file: {e}", str(path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RecordLoadError(
            f"Options file must map option names to values, got {type(data).__name__}",
            str(path),
        )

    # A relative attachments_dir is taken from the file's own directory.
    attachments_dir = data.get("attachments_dir")
    if isinstance(attachments_dir, str) and not Path(attachments_dir).is_absolute():
        data["attachments_dir"] = path.parent / attachments_dir
    return data


def load_options(path: str | Path | None = None, **overrides) -> FormatterOptions:
    """Load formatter options from a YAML file, then apply overrides.

    An empty file means all defaults. A relative `attachments_dir` in the file
    is resolved against the file's directory; overrides are used as given.

    Args:
        path: Optional YAML config file.
        **overrides: Option values that win over the file; None values are ignored.

    Returns:
        The resolved FormatterOptions.

    Raises:
        RecordLoadError: If the file cannot be read, parsed, or is not a mapping.
        RecordValidationError: If the file holds unknown or mistyped options.
    """
    data = _read_options_file(Path(path)) if path is not None else {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return parse_record(FormatterOptions, data)

"""Reference resolution against an exported result bundle."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Protocol

from .errors import ReferenceResolutionError
from .loader import load_json

logger = logging.getLogger(__name__)

ROOT_FILE = "root.json"
COVERAGE_FILE = "coverage.json"
PAYLOAD_DIR = "payloads"


class RecordResolver(Protocol):
    """What the report pipeline needs from a bundle reader."""

    async def resolve(self, ref: str | None = None) -> Any:
        """Return the record for `ref`, or the root invocation record."""
        ...

    async def export_payload(self, ref: str) -> bytes:
        """Return the raw bytes behind an attachment payload reference."""
        ...

    async def export_code_coverage(self) -> Any:
        """Return the decoded code-coverage summary."""
        ...


class BundleResolver:
    """Resolves references against a directory of exported JSON records.

    Layout:
        root.json         the invocation record
        <id>.json         any referenced record
        payloads/<id>     raw attachment payloads
        coverage.json     decoded code-coverage summary
    """

    def __init__(self, bundle_dir: str | Path):
        self.bundle_dir = Path(bundle_dir)

    def _contained(self, root: Path, name: str, ref: str | None) -> Path:
        path = root / name
        if not path.resolve().is_relative_to(root.resolve()):
            raise ReferenceResolutionError(
                ref, f"Reference points outside the bundle: {ref}"
            )
        return path

    def _record_path(self, ref: str | None) -> Path:
        name = ROOT_FILE if ref is None else f"{ref}.json"
        path = self._contained(self.bundle_dir, name, ref)
        if not path.is_file():
            raise ReferenceResolutionError(ref, f"Record not found: {path}")
        return path

    async def resolve(self, ref: str | None = None) -> Any:
        path = self._record_path(ref)
        logger.debug("Resolving %s from %s", ref or "<root>", path)
        return await asyncio.to_thread(load_json, path)

    async def export_payload(self, ref: str) -> bytes:
        path = self._contained(self.bundle_dir / PAYLOAD_DIR, ref, ref)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise ReferenceResolutionError(ref, f"Cannot read payload: {e}") from e

    async def export_code_coverage(self) -> Any:
        path = self.bundle_dir / COVERAGE_FILE
        if not path.is_file():
            raise ReferenceResolutionError(COVERAGE_FILE, f"No coverage data: {path}")
        return await asyncio.to_thread(load_json, path)

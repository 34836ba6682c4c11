"""Export activity attachments out of a bundle."""

import asyncio
import logging
from pathlib import Path

from ..schema.records import ActivitySummary
from ..schema.resolver import RecordResolver

logger = logging.getLogger(__name__)


class AttachmentExporter:
    """Writes the payloads attached to an activity into a directory.

    Instances are passed to `flatten_activities` as its `export_attachments`
    callable. One exporter never writes two payloads to the same path: a name
    that is already taken gets the payload id appended to its stem.
    """

    def __init__(self, resolver: RecordResolver, output_dir: str | Path):
        self.resolver = resolver
        self.output_dir = Path(output_dir)
        self._taken: set[Path] = set()

    async def __call__(self, activity: ActivitySummary) -> list[str]:
        """Export every attachment of `activity` that has a payload.

        Returns:
            Paths of the written files, in attachment order.
        """
        written: list[str] = []
        for attachment in activity.attachments:
            if attachment.payload_ref is None:
                continue

            ref = attachment.payload_ref.id
            payload = await self.resolver.export_payload(ref)
            path = self._claim(attachment.filename or attachment.name or ref, ref)

            await asyncio.to_thread(self._write, path, payload)
            logger.debug("Exported attachment %s to %s", ref, path)
            written.append(str(path))

        return written

    def _claim(self, name: str, ref: str) -> Path:
        path = self.output_dir / Path(name).name
        if path in self._taken:
            path = path.with_name(f"{path.stem}_{Path(ref).name}{path.suffix}")
        counter = 1
        base = path
        while path in self._taken:
            path = base.with_name(f"{base.stem}_{counter}{base.suffix}")
            counter += 1
        self._taken.add(path)
        return path

    def _write(self, path: Path, payload: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)

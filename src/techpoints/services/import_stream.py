"""Reading the NDJSON progress stream of a spreadsheet import."""
from __future__ import annotations

import codecs
import json
import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from pydantic import ValidationError

from techpoints.schemas.services import ImportEvent

logger = logging.getLogger(__name__)

PROGRESS_CAP = 95.0


def iter_ndjson(chunks: Iterable[bytes]) -> Iterator[dict]:
    """Yield one decoded object per non-blank line.

    Chunks may split lines and multi-byte characters anywhere. Invalid UTF-8
    bytes decode to U+FFFD. Lines that are not valid JSON objects are logged
    and skipped.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""
    for chunk in chunks:
        buffer += decoder.decode(chunk)
        *lines, buffer = buffer.split("\n")
        for line in lines:
            obj = _parse_line(line)
            if obj is not None:
                yield obj
    buffer += decoder.decode(b"", final=True)
    obj = _parse_line(buffer)
    if obj is not None:
        yield obj


def _parse_line(line: str) -> dict | None:
    if not line.strip():
        return None
    try:
        obj = json.loads(line)
    except json.JSONDecodeError:
        logger.warning("Skipping malformed import stream line: %.200s", line)
        return None
    if not isinstance(obj, dict):
        logger.warning("Skipping non-object import stream line: %.200s", line)
        return None
    return obj


def iter_events(chunks: Iterable[bytes]) -> Iterator[ImportEvent]:
    for obj in iter_ndjson(chunks):
        try:
            yield ImportEvent.model_validate(obj)
        except ValidationError as exc:
            logger.warning("Skipping unrecognised import event %s: %s", obj, exc)


@dataclass
class ImportProgress:
    """Running totals shown while an import streams in."""

    expected_rows: int = 200
    processed: int = 0
    success: int = 0
    duplicates: int = 0
    invalid_dates: int = 0
    percent: float = 0.0
    done: bool = False
    error: str | None = None
    status_text: str = "Processing..."
    logs: list[str] = field(default_factory=list)

    def apply(self, event: ImportEvent) -> None:
        if event.type == "progress":
            self._set_counts(event.processed, event)
            self.percent = min(self.processed / self.expected_rows * 100, PROGRESS_CAP)
        elif event.type == "log":
            self.logs.append(f"> {event.msg}")
        elif event.type == "done":
            self._set_counts(event.total, event)
            self.percent = 100.0
            self.done = True
            self.status_text = "Import finished!"
        elif event.type == "error":
            self.error = event.msg or "Unknown import error"
        else:
            logger.debug("Ignoring import event type %r", event.type)

    def _set_counts(self, processed: int | None, event: ImportEvent) -> None:
        self.processed = processed or 0
        self.success = event.success or 0
        self.duplicates = event.duplicados or 0
        self.invalid_dates = event.data_invalida or 0

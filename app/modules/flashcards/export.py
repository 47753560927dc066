"""CSV/JSON encoders for flashcard sets and local file delivery.

CSV is the spreadsheet-friendly format (question and answer only); JSON keeps
the full card structure, tags included.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from app.core.logging import get_logger
from app.modules.flashcards.models.flashcards import Flashcard

logger = get_logger(__name__)

CSV_HEADER = ("Question", "Answer")
CSV_MIME = "text/csv"
JSON_MIME = "application/json"

_WHITESPACE = re.compile(r"\s+")
_PATH_SEPARATORS = re.compile(r"[\\/]+")


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: str
    mime_type: str


def _quote(value: str) -> str:
    return '"' + str(value).replace('"', '""') + '"'


def to_csv(cards: Iterable[Flashcard]) -> str:
    """Encode cards as CSV, quoting every field."""
    rows = [CSV_HEADER] + [(c.question, c.answer) for c in cards]
    return "\n".join(",".join(_quote(v) for v in row) for row in rows)


def to_json(title: str, cards: Iterable[Flashcard]) -> str:
    """Encode a titled set as a pretty-printed JSON document."""
    doc = {"title": title, "flashcards": [c.to_dict() for c in cards]}
    return json.dumps(doc, indent=2, ensure_ascii=False)


def export_filename(title: str, ext: str) -> str:
    slug = _WHITESPACE.sub("-", _PATH_SEPARATORS.sub("-", title)).lower()
    return f"{slug}.{ext.lstrip('.')}"


def build_csv_export(title: str, cards: Iterable[Flashcard]) -> ExportFile:
    return ExportFile(export_filename(title, "csv"), to_csv(cards), CSV_MIME)


def build_json_export(title: str, cards: Iterable[Flashcard]) -> ExportFile:
    return ExportFile(export_filename(title, "json"), to_json(title, cards), JSON_MIME)


def download_text(
    filename: str, text: str, mime_type: str = "text/plain", directory: Path | str = "."
) -> Path:
    """Save ``text`` as ``filename`` under ``directory`` and return the path.

    Newlines are written untranslated so the file matches the encoder output.
    """
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / Path(filename).name
    path.write_text(text, encoding="utf-8", newline="")
    logger.info("Saved %s export to %s (%d bytes)", mime_type, path, len(text))
    return path

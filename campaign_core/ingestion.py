"""Upload parsing: CSV / XLSX bytes -> ordered row mappings."""

from __future__ import annotations

import io
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional, Sequence

import pandas as pd

from campaign_core.data import is_missing, to_native

logger = logging.getLogger(__name__)

UploadKind = Literal["csv", "excel"]
Row = Dict[str, Any]

PREVIEW_PER_FILE = 5
PREVIEW_LIMIT = 10
MAX_PARSE_WORKERS = 4
XLS_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

_INT_RE = re.compile(r"^\s*-?\d+\s*$")
_FLOAT_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")


@dataclass(frozen=True)
class UploadedFile:
    name: str
    content: bytes


@dataclass(frozen=True)
class ParsedFile:
    name: str
    rows: List[Row] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ParsedUpload:
    rows: List[Row]
    preview: List[Row]
    files: List[ParsedFile]

    @property
    def failed(self) -> List[str]:
        return [f.name for f in self.files if not f.ok]


def coerce_cell(value: str) -> Any:
    """Dynamic typing for delimited text: numeric-looking strings become numbers."""
    if is_missing(value):
        return None
    s = str(value)
    if s.strip() == "":
        return None
    if s in ("true", "TRUE"):
        return True
    if s in ("false", "FALSE"):
        return False
    if _INT_RE.match(s):
        return int(s)
    if _FLOAT_RE.match(s):
        return float(s)
    return s


def parse_csv_bytes(content: bytes) -> List[Row]:
    try:
        header = pd.read_csv(io.BytesIO(content), nrows=0, encoding="utf-8-sig")
    except pd.errors.EmptyDataError:
        return []
    width = len(header.columns)
    # Lines with extra fields keep their leading cells; short lines are padded.
    df = pd.read_csv(
        io.BytesIO(content),
        dtype=object,
        keep_default_na=False,
        skip_blank_lines=True,
        encoding="utf-8-sig",
        engine="python",
        index_col=False,
        on_bad_lines=lambda fields: fields[:width],
    )
    return [
        {str(k): coerce_cell(v) for k, v in record.items()}
        for record in df.to_dict(orient="records")
    ]


def excel_engine(content: bytes) -> str:
    """Legacy ``.xls`` workbooks (OLE2 container) go through xlrd, everything else openpyxl."""
    return "xlrd" if content.startswith(XLS_SIGNATURE) else "openpyxl"


def parse_excel_bytes(content: bytes) -> List[Row]:
    df = pd.read_excel(io.BytesIO(content), sheet_name=0, engine=excel_engine(content))
    rows: List[Row] = []
    for record in df.to_dict(orient="records"):
        # Blank cells are left out of the row, so key presence follows the sheet.
        row = {str(k): to_native(v) for k, v in record.items() if not is_missing(v)}
        if row:
            rows.append(row)
    return rows


PARSERS: Dict[str, Callable[[bytes], List[Row]]] = {
    "csv": parse_csv_bytes,
    "excel": parse_excel_bytes,
}


def _parse_one(parser: Callable[[bytes], List[Row]], upload: UploadedFile) -> ParsedFile:
    try:
        return ParsedFile(name=upload.name, rows=parser(upload.content))
    except Exception as exc:
        logger.warning("Skipping %s: %s", upload.name, exc)
        return ParsedFile(name=upload.name, error=f"{type(exc).__name__}: {exc}")


def build_preview(files: Sequence[ParsedFile]) -> List[Row]:
    preview: List[Row] = []
    for parsed in files:
        preview.extend(parsed.rows[:PREVIEW_PER_FILE])
    return preview[:PREVIEW_LIMIT]


def parse_uploads(files: Sequence[UploadedFile], kind: UploadKind) -> ParsedUpload:
    """Parse every file concurrently and combine them in selection order.

    ``executor.map`` yields results in submission order, so a slow first file
    still lands first no matter which parse finishes earlier. Files that fail
    to parse contribute no rows and are reported through ``ParsedUpload.failed``.
    """
    parser = PARSERS.get(kind)
    if parser is None:
        raise ValueError(f"Unsupported upload kind: {kind!r}")
    if not files:
        return ParsedUpload(rows=[], preview=[], files=[])

    workers = max(1, min(MAX_PARSE_WORKERS, len(files)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        parsed = list(pool.map(lambda f: _parse_one(parser, f), files))

    rows: List[Row] = []
    for item in parsed:
        rows.extend(item.rows)
    logger.info("Parsed %d %s file(s): %d rows, %d failed", len(parsed), kind, len(rows), sum(1 for p in parsed if not p.ok))
    return ParsedUpload(rows=rows, preview=build_preview([p for p in parsed if p.ok]), files=parsed)

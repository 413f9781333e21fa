"""
shopseed.importer.reader - Delimited record reading.

Responsibilities:
  • BOM removal (UTF-8 / UTF-8-SIG)
  • Header whitespace stripping
  • Empty-line skipping
  • Column-count checking: one malformed row fails the whole read
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from shopseed.core.exceptions import FormatError

Record = Dict[str, str]


def read_records(
    raw: str | bytes,
    source: Optional[str] = None,
    required: Sequence[str] = (),
    allow_empty: bool = False,
) -> List[Record]:
    """
    Parse header + comma-delimited rows into one dict per row,
    in input order.  Raises FormatError on structural problems or
    when a column named in required is absent from the header.

    Blank text is a FormatError unless allow_empty is set, in which
    case it reads as zero records.
    """
    text = _decode(raw)
    if not text.strip():
        if allow_empty:
            return []
        raise FormatError("Source is empty", source=source)

    rows = csv.reader(io.StringIO(text, newline=""))
    header: Optional[List[str]] = None
    records: List[Record] = []

    try:
        for row in rows:
            if not row:
                continue
            if header is None:
                header = [h.strip() for h in row]
                _require_columns(header, required, source)
                continue
            if len(row) != len(header):
                raise FormatError(
                    f"Expected {len(header)} columns, found {len(row)}",
                    source=source,
                    line=rows.line_num,
                )
            records.append(dict(zip(header, row)))
    except csv.Error as exc:
        raise FormatError(str(exc), source=source, line=rows.line_num) from exc

    if header is None:
        raise FormatError("Source has no header row", source=source)
    return records


def read_source(
    path: Path,
    required: Sequence[str] = (),
    allow_empty: bool = False,
) -> List[Record]:
    """Read one source file from disk."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise FormatError(f"Cannot read {path}: {exc.strerror}", source=str(path)) from exc
    return read_records(
        raw, source=Path(path).name, required=required, allow_empty=allow_empty
    )


def _require_columns(header: List[str], required: Sequence[str], source: Optional[str]) -> None:
    missing = [c for c in required if c not in header]
    if missing:
        raise FormatError(f"Missing required columns: {', '.join(missing)}", source=source)


def _decode(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        if raw.startswith(b"\xef\xbb\xbf"):
            raw = raw[3:]
        return raw.decode("utf-8", errors="replace")
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw

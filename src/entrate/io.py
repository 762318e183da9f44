"""
Loading symbol sequences and writing result rows.

- load_sequence: one symbol per line, or one column of a CSV file selected by
  header name or index. Tokens are converted to int when all are integral.
- write_csv_rows: dict rows to CSV, refusing to append under a different
  header.
"""

from __future__ import annotations
import csv
from pathlib import Path
from typing import Any, Dict, Hashable, List, Optional, Sequence


def _coerce(tokens: List[str]) -> List[Hashable]:
    try:
        return [int(t) for t in tokens]
    except ValueError:
        return list(tokens)


def load_sequence(path: str | Path, column: str | int | None = None) -> List[Hashable]:
    """Load a symbol sequence from a text or CSV file.

    With column=None the file holds one symbol per line. Otherwise the file
    is read as CSV with a header row and the named (str) or indexed (int)
    column is returned. Blank entries are skipped.
    """
    path = Path(path)
    with path.open("r", newline="", encoding="utf-8") as f:
        if column is None:
            tokens = [line.strip() for line in f]
        else:
            reader = csv.reader(f)
            header = next(reader, None)
            if header is None:
                raise ValueError(f"{path} is empty")
            if isinstance(column, str):
                if column not in header:
                    raise ValueError(f"Column '{column}' not found in CSV header.")
                col = header.index(column)
            else:
                col = int(column)
                if not 0 <= col < len(header):
                    raise ValueError(f"Column index {col} out of range for {len(header)} columns.")
            tokens = [row[col].strip() for row in reader if len(row) > col]
    return _coerce([t for t in tokens if t])


def write_csv_rows(
    path: str | Path,
    rows: Sequence[Dict[str, Any]],
    append: bool = False,
    fieldnames: Optional[List[str]] = None,
) -> None:
    """Write dict rows with a header; appends only under an identical header."""
    path = Path(path)
    if not rows:
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    if fieldnames is None:
        fieldnames = list(rows[0].keys())

    file_exists = path.exists() and path.stat().st_size > 0
    write_header = (not append) or (not file_exists)
    if append and file_exists:
        with path.open("r", newline="", encoding="utf-8") as f:
            existing_header = next(csv.reader(f), None)
        if existing_header is not None and list(existing_header) != list(fieldnames):
            raise ValueError(
                f"CSV header mismatch when appending to {path}.\n"
                f"Existing: {existing_header}\n"
                f"New:      {fieldnames}"
            )

    with path.open("a" if append else "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
        if write_header:
            writer.writeheader()
        writer.writerows(rows)

"""TOON (Token-Oriented Object Notation) rendering of a ranked repo map."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from contextcrumb.models import RankedFile, Signature

DEFAULT_MAX_SIGNATURES_PER_FILE = 10

_NEEDS_QUOTING = re.compile(r'[,:"\\{}\[\]]')
_LOOKS_NUMERIC = re.compile(r"^-?(?:0|[1-9]\d*)(?:\.\d+)?$")
_KEYWORDS = frozenset({"true", "false", "null"})


def encode(
    ranked_files: Sequence[RankedFile],
    signatures: Mapping[str, Sequence[Signature]],
    *,
    max_signatures_per_file: int = DEFAULT_MAX_SIGNATURES_PER_FILE,
    show_scores: bool = False,
) -> str:
    """Encode ranked files and their signatures as TOON tables.

    Args:
        ranked_files: Files to list, in rank order.
        signatures: Path -> signatures, already ordered per file.
        max_signatures_per_file: Signatures kept per file.
        show_scores: Add a rank column to the files table.

    Returns:
        TOON-formatted string (no trailing newline).
    """
    file_columns = ["path", "defs", "refs"]
    if show_scores:
        file_columns.append("rank")

    file_rows: list[list[str]] = []
    signature_rows: list[list[str]] = []
    for rf in ranked_files:
        row = [rf.path, str(rf.def_count), str(rf.ref_count)]
        if show_scores:
            row.append(f"{rf.rank:.4f}")
        file_rows.append(row)

        for sig in list(signatures.get(rf.path, ()))[:max_signatures_per_file]:
            signature_rows.append([sig.file, str(sig.line), sig.text, str(sig.refs)])

    return "\n".join(
        [
            _format_tabular("files", file_columns, file_rows),
            _format_tabular(
                "signatures", ["file", "line", "text", "refs"], signature_rows
            ),
        ]
    )


def _format_tabular(
    name: str,
    columns: list[str],
    rows: list[list[str]],
) -> str:
    """Format one TOON tabular array: a ``name[N]{cols}:`` header plus rows."""
    lines = [f"{name}[{len(rows)}]{{{','.join(columns)}}}:"]
    for row in rows:
        lines.append(f"  {','.join(_encode_value(cell) for cell in row)}")
    return "\n".join(lines)


def _encode_value(value: str) -> str:
    """Encode a single cell, quoting it when TOON requires."""
    if not value:
        return '""'
    if (
        value != value.strip()
        or any(c in value for c in "\n\r\t")
        or value.lower() in _KEYWORDS
    ):
        return _quote(value)
    if _LOOKS_NUMERIC.match(value):
        return value
    if _NEEDS_QUOTING.search(value) or value.startswith("-"):
        return _quote(value)
    return value


def _quote(value: str) -> str:
    """Double-quote a string with TOON escape rules."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    escaped = escaped.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
    return f'"{escaped}"'

#!/usr/bin/env python3
# menuconsole/ui/table.py
from __future__ import annotations

from typing import List, Optional, Sequence

from .ansi import strip_ansi


def _column_widths(rows: Sequence[Sequence[str]]) -> List[int]:
    """Compute visual widths ignoring ANSI sequences."""
    widths: List[int] = []
    for row in rows:
        for col_idx, cell in enumerate(row):
            cell_length = len(strip_ansi(cell))
            if col_idx >= len(widths):
                widths.append(cell_length)
            else:
                widths[col_idx] = max(widths[col_idx], cell_length)
    return widths


def format_table(
    rows: Sequence[Sequence[object]],
    headers: Optional[Sequence[object]] = None,
    *,
    padding: int = 2,
) -> str:
    """Return left-aligned columns (ANSI-safe width calculation), with an underlined header."""
    str_rows = [[str(cell) for cell in row] for row in rows]
    str_headers = [str(h) for h in headers] if headers is not None else None
    widths = _column_widths(([str_headers] if str_headers else []) + str_rows)
    gap = " " * padding

    def render_row(row: Sequence[str]) -> str:
        cells = [cell + " " * (widths[i] - len(strip_ansi(cell))) for i, cell in enumerate(row)]
        return gap.join(cells).rstrip()

    lines: List[str] = []
    if str_headers is not None:
        lines.append(render_row(str_headers))
        lines.append(render_row(["-" * w for w in widths]))
    lines.extend(render_row(row) for row in str_rows)
    return "\n".join(lines)

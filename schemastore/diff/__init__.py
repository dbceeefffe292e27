"""
Diff module for schemastore.

This module compares two store snapshots:
- Row matching by composite identity
- Field-level comparison with deep equality
- Statement (create/drop/alter) and row-diff (insert/delete/update) output

Invariants:
    - Diffing never mutates either store
    - Output order is creates, drops, alters
"""

from .engine import (
    DiffMode,
    DiffType,
    RowDiff,
    diff,
    diff_all,
    diff_alters,
    diff_create_drop,
    diff_creates,
    diff_drops,
    diff_rows,
    sanitize_row,
)

__all__ = [
    "DiffMode",
    "DiffType",
    "RowDiff",
    "diff",
    "diff_rows",
    "diff_all",
    "diff_creates",
    "diff_drops",
    "diff_alters",
    "diff_create_drop",
    "sanitize_row",
]

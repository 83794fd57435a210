"""
results_parser.py
=================
Row mapping utilities for sport80 results tables.

The scraper reads each results row as a plain list of cell texts; this module
turns those lists into CompetitionResult records. Kept free of any browser
code so it can be tested on its own.
"""

import re
from typing import Any


# Output schema for every scraped result row
RESULT_SCHEMA = {
    "lifter":     str,     # "Last, First" as shown on the results page
    "bodyWeight": float,   # Bodyweight in kg
    "snatch1":    float,   # Snatch attempts (missed attempts are 0 or negative)
    "snatch2":    float,
    "snatch3":    float,
    "snatch":     float,   # Best snatch
    "cj1":        float,   # Clean & jerk attempts
    "cj2":        float,
    "cj3":        float,
    "cj":         float,   # Best clean & jerk
    "total":      float,
}

RESULT_FIELDS = list(RESULT_SCHEMA)

# 0-indexed <td> positions in the results table.
# "cj" reads the best-lift column (12) while the attempts sit at 13-15, and
# "total" reads column 13, the same cell as cj1. Existing data files were
# generated with this mapping; use compute_total=True to derive the total
# from snatch + cj instead.
COLUMN_MAP = {
    "lifter":     3,
    "bodyWeight": 4,
    "snatch1":    8,
    "snatch2":    9,
    "snatch3":    10,
    "snatch":     11,
    "cj":         12,
    "cj1":        13,
    "cj2":        14,
    "cj3":        15,
    "total":      13,
}

TEXT_FIELDS = {"lifter"}

# Leading numeric prefix, same as JavaScript parseFloat()
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(text: Any) -> float:
    """
    Parse a cell's text as a number.

    Reads the leading numeric part of the trimmed text ("81.5kg" -> 81.5).
    Empty, missing or non-numeric text ("", "-", "DNF") gives 0.
    """
    if text is None:
        return 0
    match = _NUMBER_RE.match(str(text).strip())
    if not match:
        return 0
    return float(match.group(0)) or 0


def parse_row(cells: list, compute_total: bool = False) -> dict:
    """
    Map one results row to a CompetitionResult dict.

    Args:
        cells:         Cell texts of a single <tr>, in column order
        compute_total: Set total to snatch + cj instead of reading column 13

    Returns:
        Dict with every field in RESULT_SCHEMA
    """
    result = {}
    for field in RESULT_FIELDS:
        value = _cell(cells, COLUMN_MAP[field])
        if field in TEXT_FIELDS:
            result[field] = _clean(value)
        else:
            result[field] = parse_number(value)

    if compute_total:
        result["total"] = result["snatch"] + result["cj"]

    return result


def parse_rows(rows: list, compute_total: bool = False) -> list[dict]:
    """Map every row of a results page. Rows with no cells at all are skipped."""
    return [parse_row(cells, compute_total=compute_total) for cells in rows if cells]


def _cell(cells: list, index: int) -> Any:
    """Return the cell at index, or None when the row is too short."""
    if index < len(cells):
        return cells[index]
    return None


def _clean(value: Any) -> str:
    """Safely convert a value to a clean string."""
    if value is None:
        return ""
    return str(value).strip()

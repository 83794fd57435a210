"""
tests/test_results_parser.py
============================
Unit tests for parse_number(), parse_row() and parse_rows().

Run:
  python -m pytest tests/ -v
"""

import sys
from pathlib import Path

# Allow importing from scrapers/
sys.path.insert(0, str(Path(__file__).parent.parent))

from scrapers.results_parser import RESULT_FIELDS, parse_number, parse_row, parse_rows


def make_row(**cells):
    """Build a 16-cell row, filling the given indexes (c3="Doe, Jane", ...)."""
    row = [""] * 16
    for key, value in cells.items():
        row[int(key[1:])] = value
    return row


# ─────────────────────────────────────────────────────────────────────────────
# parse_number tests
# ─────────────────────────────────────────────────────────────────────────────

class TestParseNumber:

    def test_integer(self):
        assert parse_number("95") == 95

    def test_decimal(self):
        assert parse_number("81.5") == 81.5

    def test_surrounding_whitespace(self):
        assert parse_number("  102 \n") == 102

    def test_negative_missed_attempt(self):
        assert parse_number("-110") == -110

    def test_leading_numeric_prefix(self):
        assert parse_number("81.5kg") == 81.5

    def test_non_numeric_is_zero(self):
        assert parse_number("") == 0
        assert parse_number("DNF") == 0
        assert parse_number("-") == 0
        assert parse_number("---") == 0

    def test_missing_cell_is_zero(self):
        assert parse_number(None) == 0


# ─────────────────────────────────────────────────────────────────────────────
# parse_row tests
# ─────────────────────────────────────────────────────────────────────────────

class TestParseRow:

    def test_full_row_mapping(self):
        row = ["", "", "", "Doe, Jane", "81.5", "", "", "",
               "95", "100", "-", "100", "120", "125", "130", "130"]
        result = parse_row(row)
        assert result == {
            "lifter": "Doe, Jane",
            "bodyWeight": 81.5,
            "snatch1": 95,
            "snatch2": 100,
            "snatch3": 0,
            "snatch": 100,
            "cj1": 125,
            "cj2": 130,
            "cj3": 130,
            "cj": 120,
            "total": 125,
        }

    def test_total_reads_cj1_column(self):
        result = parse_row(make_row(c3="Smith, J.", c13="250"))
        assert result["lifter"] == "Smith, J."
        assert result["cj1"] == 250
        assert result["total"] == 250

    def test_compute_total(self):
        row = make_row(c3="Smith, J.", c11="110", c12="140", c13="250")
        result = parse_row(row, compute_total=True)
        assert result["total"] == 250
        assert result["cj1"] == 250

        row = make_row(c3="Smith, J.", c11="110", c12="140", c13="135")
        assert parse_row(row, compute_total=True)["total"] == 250

    def test_short_row_defaults(self):
        result = parse_row(["1", "2", "3"])
        assert result["lifter"] == ""
        assert all(result[f] == 0 for f in RESULT_FIELDS if f != "lifter")

    def test_lifter_is_trimmed(self):
        assert parse_row(make_row(c3="  Lee, Ana  "))["lifter"] == "Lee, Ana"

    def test_non_numeric_cells_zero(self):
        result = parse_row(make_row(c3="Roe, Ed", c4="DNF", c8="", c11="x"))
        assert result["bodyWeight"] == 0
        assert result["snatch1"] == 0
        assert result["snatch"] == 0

    def test_has_every_field(self):
        assert set(parse_row(make_row())) == set(RESULT_FIELDS)


class TestParseRows:

    def test_maps_each_row(self):
        rows = [make_row(c3="A"), make_row(c3="B")]
        assert [r["lifter"] for r in parse_rows(rows)] == ["A", "B"]

    def test_skips_rows_without_cells(self):
        rows = [[], make_row(c3="A")]
        assert len(parse_rows(rows)) == 1

    def test_empty_page(self):
        assert parse_rows([]) == []

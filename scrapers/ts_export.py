"""
ts_export.py
============
Writes scraped results to a generated TypeScript data module.

The module is rewritten in full after every scraped event, so the file on
disk always holds everything collected so far in the current run.
"""

import json
import locale
import math
import unicodedata
from datetime import datetime, timezone
from pathlib import Path

from scrapers.results_parser import RESULT_FIELDS


OUTPUT_FILE = Path("2023_weightlifting_data.ts")

TS_INTERFACE = """export interface LiftResult {
    lifter: string;
    bodyWeight: number;
    snatch1: number;
    snatch2: number;
    snatch3: number;
    snatch: number;
    cj1: number;
    cj2: number;
    cj3: number;
    cj: number;
    total: number;
}"""


def flatten_results(events: list[dict]) -> list[dict]:
    """Collect the results of every event into one list, in event order."""
    return [result for event in events for result in event.get("results", [])]


def sort_results(results: list[dict]) -> list[dict]:
    """Return results sorted by lifter name, accent- and case-insensitively first."""
    return sorted(results, key=lambda r: _collation_key(r.get("lifter", "")))


def _collation_key(name: str) -> tuple:
    return (_base_letters(name), locale.strxfrm(name.casefold()), name)


def _base_letters(name: str) -> str:
    """Case-folded name with accents removed, so 'Émile' sorts beside 'Emile'."""
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def format_number(value) -> str:
    """Render a number the way a JS literal would: 95, 81.5, -102."""
    value = float(value)
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_result(result: dict) -> str:
    """Render one result as a single-line object literal."""
    parts = []
    for field in RESULT_FIELDS:
        if field == "lifter":
            value = json.dumps(result.get(field, ""), ensure_ascii=False)
        else:
            value = format_number(result.get(field, 0))
        parts.append(f"{field}: {value}")
    return "  { " + ", ".join(parts) + " }"


def render_module(results: list[dict], generated_at: datetime = None) -> str:
    """
    Build the TypeScript module text.

    Args:
        results:      Already-sorted result dicts
        generated_at: Timestamp for the header comment (defaults to now, UTC)
    """
    if generated_at is None:
        generated_at = datetime.now(timezone.utc)
    stamp = generated_at.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    stamp = stamp.replace("+00:00", "Z")

    body = ",\n".join(format_result(r) for r in results)

    return (
        "// Generated by weightlifting scraper\n"
        f"// Last updated: {stamp}\n"
        "\n"
        f"{TS_INTERFACE}\n"
        "\n"
        "export const liftingResults: LiftResult[] = [\n"
        f"{body}\n"
        "];\n"
    )


def save_data(events: list[dict], path: Path = OUTPUT_FILE) -> int:
    """
    Overwrite path with every result collected so far.

    Returns:
        Number of results written
    """
    results = sort_results(flatten_results(events))
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(render_module(results))

    print(f"[Export] {len(results):,} total results → {path}")
    return len(results)

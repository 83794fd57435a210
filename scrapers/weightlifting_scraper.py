"""
Weightlifting Results Scraper
=============================
Scrapes competition results from the USA Weightlifting sport80 rankings site
for a descending range of event IDs and writes every lifter's row to a
generated TypeScript module.

Usage:
  # Step 1: Install deps
  pip install -e .
  playwright install chromium

  # Step 2: Scrape the default event range (6178 down to 5652)
  python -m scrapers.weightlifting_scraper

  # Scrape a smaller range into a different file
  python -m scrapers.weightlifting_scraper --start-id=6178 --end-id=6170 --output=out/data.ts

  # Write total as snatch + cj instead of the raw column
  python -m scrapers.weightlifting_scraper --compute-total
"""

import asyncio
import argparse
import locale
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from playwright.async_api import async_playwright, Error as PlaywrightError

from scrapers.results_parser import parse_rows
from scrapers.ts_export import OUTPUT_FILE, save_data

# ─────────────────────────────────────────────────────────────────────────────
# CONFIGURATION
# ─────────────────────────────────────────────────────────────────────────────
BASE_URL     = "https://usaweightlifting.sport80.com"
RESULTS_URL  = BASE_URL + "/public/rankings/results/{event_id}"

START_ID     = 6178   # first event visited (highest ID)
END_ID       = 5652   # last event visited (lowest ID)

VIEWPORT     = {"width": 1920, "height": 1080}
USER_AGENT   = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

ROW_SELECTOR         = "table tbody tr"
ERROR_SELECTOR       = ".error-message"
NEXT_PAGE_SELECTOR   = 'button[aria-label="Next page"]:not([disabled])'
EVENT_NAME_SELECTOR  = "h1, .event-title, .page-title"
EVENT_DATE_SELECTOR  = "time, .event-date, .date"

# Playwright timeouts, in milliseconds
NAVIGATION_TIMEOUT   = 30000
CONTENT_TIMEOUT      = 5000
ROWS_TIMEOUT         = 30000

# Courtesy delays, in seconds
EVENT_DELAY          = 2
PAGE_TURN_DELAY      = 1

# Runs in the page: cell texts of every results row
ROWS_SCRIPT = """
(selector) => Array.from(document.querySelectorAll(selector)).map(
    row => Array.from(row.querySelectorAll('td')).map(
        cell => cell.textContent ? cell.textContent.trim() : ''
    )
)
"""
# ─────────────────────────────────────────────────────────────────────────────


def event_url(event_id: int) -> str:
    return RESULTS_URL.format(event_id=event_id)


def event_ids(start_id: int = START_ID, end_id: int = END_ID) -> range:
    """Every ID from start_id down to end_id, both inclusive."""
    return range(start_id, end_id - 1, -1)


# ══════════════════════════════════════════════════════════════════════════════
# BROWSER SESSION
# ══════════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def open_session(pw, headless: bool = True):
    """
    Launch Chromium with a fixed desktop viewport/user agent and yield a page.

    The context and then the browser are closed on every exit path. Launch
    failures are not retried.
    """
    print("[Session] Launching browser...")
    browser = await pw.chromium.launch(headless=headless)
    try:
        context = await browser.new_context(viewport=VIEWPORT, user_agent=USER_AGENT)
        try:
            yield await context.new_page()
        finally:
            await context.close()
    finally:
        await browser.close()


# ══════════════════════════════════════════════════════════════════════════════
# EVENT PAGE
# ══════════════════════════════════════════════════════════════════════════════

async def _wait_for(page, selector: str, timeout: int) -> bool:
    try:
        await page.wait_for_selector(selector, timeout=timeout)
        return True
    except PlaywrightError:
        return False


async def wait_for_content(page) -> bool:
    """
    Race the first results row against the error marker.

    Returns True as soon as either selector shows up, False once both waits
    have timed out.
    """
    waits = [
        asyncio.ensure_future(_wait_for(page, ROW_SELECTOR, CONTENT_TIMEOUT)),
        asyncio.ensure_future(_wait_for(page, ERROR_SELECTOR, CONTENT_TIMEOUT)),
    ]
    try:
        for finished in asyncio.as_completed(waits):
            if await finished:
                return True
        return False
    finally:
        for w in waits:
            w.cancel()


async def has_results_table(page) -> bool:
    return await _wait_for(page, ROW_SELECTOR, CONTENT_TIMEOUT)


async def extract_text(page, selector: str, default: str) -> str:
    """Trimmed text of the first element matching selector, or default."""
    try:
        text = await page.eval_on_selector(
            selector, "el => el.textContent ? el.textContent.trim() : ''"
        )
    except PlaywrightError:
        return default
    return text.strip() if text and text.strip() else default


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


# ══════════════════════════════════════════════════════════════════════════════
# RESULTS PAGINATION
# ══════════════════════════════════════════════════════════════════════════════

async def scrape_event_results(page, compute_total: bool = False) -> list[dict]:
    """
    Collect result rows from every page of the loaded event.

    Follows the "Next page" button until it is missing or disabled. A row
    wait that times out raises, abandoning the whole event.
    """
    all_results = []
    has_next_page = True

    while has_next_page:
        await page.wait_for_selector(ROW_SELECTOR, timeout=ROWS_TIMEOUT)
        rows = await page.evaluate(ROWS_SCRIPT, ROW_SELECTOR)
        all_results.extend(parse_rows(rows, compute_total=compute_total))

        next_button = await page.query_selector(NEXT_PAGE_SELECTOR)
        if next_button:
            await next_button.click()
            await asyncio.sleep(PAGE_TURN_DELAY)
            await page.wait_for_selector(ROW_SELECTOR, timeout=ROWS_TIMEOUT)
        else:
            has_next_page = False

    return all_results


# ══════════════════════════════════════════════════════════════════════════════
# CRAWL
# ══════════════════════════════════════════════════════════════════════════════

async def scrape_event(page, event_id: int, compute_total: bool = False):
    """
    Load one event and scrape it.

    Returns:
        Event dict (id, name, date, results), or None when the page has no
        results table
    """
    await page.goto(event_url(event_id), wait_until="networkidle", timeout=NAVIGATION_TIMEOUT)

    if not await wait_for_content(page):
        print(f"  [Scrape] No content found for event {event_id}, skipping...")
        return None

    if not await has_results_table(page):
        print(f"  [Scrape] No results table found for event {event_id}, skipping...")
        return None

    name = await extract_text(page, EVENT_NAME_SELECTOR, f"Event {event_id}")
    date = await extract_text(page, EVENT_DATE_SELECTOR, _today())

    results = await scrape_event_results(page, compute_total=compute_total)
    return {
        "id": event_id,
        "name": name,
        "date": date,
        "results": results,
    }


async def crawl(page, ids, output: Path = OUTPUT_FILE, compute_total: bool = False) -> list[dict]:
    """
    Scrape every event ID in order, rewriting output after each event with results.

    A failure on one event is printed and the crawl moves on. Returns the
    events that produced results.
    """
    all_events = []

    for event_id in ids:
        try:
            print(f"[Scrape] Scraping event ID: {event_id}")
            event = await scrape_event(page, event_id, compute_total=compute_total)

            if event and event["results"]:
                all_events.append(event)
                print(f"  [Scrape] {len(event['results'])} results for {event['name']}")
                save_data(all_events, output)
        except Exception as e:
            print(f"  [Scrape] Failed to scrape event {event_id}: {e}")
        finally:
            await asyncio.sleep(EVENT_DELAY)

    return all_events


async def scrape_weightlifting_data(start_id: int = START_ID, end_id: int = END_ID,
                                    output: Path = OUTPUT_FILE, headless: bool = True,
                                    compute_total: bool = False) -> list[dict]:
    async with async_playwright() as pw:
        async with open_session(pw, headless=headless) as page:
            return await crawl(
                page, event_ids(start_id, end_id),
                output=output, compute_total=compute_total,
            )


# ══════════════════════════════════════════════════════════════════════════════
# MAIN
# ══════════════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="USA Weightlifting results scraper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scrapers.weightlifting_scraper
  python -m scrapers.weightlifting_scraper --start-id=6178 --end-id=6100
  python -m scrapers.weightlifting_scraper --output=web/src/data/results.ts --compute-total
        """
    )
    parser.add_argument(
        "--start-id",
        type=int,
        default=START_ID,
        help=f"Highest event ID, scraped first (default {START_ID})"
    )
    parser.add_argument(
        "--end-id",
        type=int,
        default=END_ID,
        help=f"Lowest event ID, scraped last (default {END_ID})"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=OUTPUT_FILE,
        help=f"Generated TypeScript file (default {OUTPUT_FILE})"
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window"
    )
    parser.add_argument(
        "--compute-total",
        action="store_true",
        help="Write total as snatch + cj instead of reading the table's cj1 column"
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.start_id < args.end_id:
        parser.error("--start-id must be greater than or equal to --end-id")

    # Lifter names are sorted with the user's collation rules
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        print(f"[Export] Falling back to default collation: {e}")

    print("\nWeightlifting Results Scraper")
    print(f"Events: {args.start_id} → {args.end_id}")
    print(f"Output: {args.output}")
    print("=" * 60 + "\n")

    try:
        events = asyncio.run(scrape_weightlifting_data(
            start_id=args.start_id,
            end_id=args.end_id,
            output=args.output,
            headless=not args.headed,
            compute_total=args.compute_total,
        ))
    except Exception as e:
        print(f"\nScraping failed with error: {e}")
        return 1

    print(f"\nDone. {len(events)} events with results.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Loading TwistyTimer solves into a MySQL database."""

from __future__ import annotations

import os
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from itertools import islice
from urllib.parse import unquote, urlsplit

import pymysql

from .models import Puzzle, Solve, UnknownPuzzle
from .reader import parse_twistytimer

BATCH_SIZE = 20000
PROGRESS_INTERVAL = 2.0
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INSERT_SOLVE_SQL = (
    "INSERT IGNORE INTO solve "
    "(event_name, time, scramble, date, session_name, penalty, comment) "
    "VALUES (%s, %s, %s, %s, %s, %s, %s)"
)
_RULE = "-" * 50
_BANNER = "=" * 49


@dataclass(frozen=True)
class ImportSummary:
    """Counts gathered while inserting solves."""

    total: int
    processed: int
    skipped_duplicates: int
    skipped_unknown: int
    elapsed: float

    @property
    def new_inserts(self) -> int:
        return self.processed - self.skipped_duplicates

    @property
    def total_skipped(self) -> int:
        return self.skipped_duplicates + self.skipped_unknown


def get_conn(url: str | None = None) -> pymysql.connections.Connection:
    """Open a connection to the database given by a mysql:// URL or $URL."""
    if url is None:
        url = os.environ["URL"]
    parts = urlsplit(url)
    database = parts.path.lstrip("/") or None
    return pymysql.connect(
        host=parts.hostname or "localhost",
        port=parts.port or 3306,
        user=unquote(parts.username) if parts.username else None,
        password=unquote(parts.password) if parts.password else "",
        database=unquote(database) if database else None,
    )


def format_duration(seconds: float) -> str:
    """Format whole seconds as e.g. '1h 2m 3s', dropping leading zero units."""
    total = max(int(seconds), 0)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def event_name(puzzle: Puzzle | UnknownPuzzle) -> str:
    """Name of the database event a puzzle belongs to."""
    return str(puzzle)


def penalty_code(penalty: str) -> int:
    """Numeric penalty stored in the database: 0 none, 1 for +2, 2 for DNF."""
    return {"+2": 1, "DNF": 2}.get(penalty, 0)


def _chunks(items: Iterable[Solve], size: int) -> Iterator[list[Solve]]:
    iterator = iter(items)
    while chunk := list(islice(iterator, size)):
        yield chunk


def _rate(count: int, seconds: float) -> float:
    return count / seconds if seconds > 0 else 0.0


def insert_solves(conn, solves: Iterable[Solve]) -> ImportSummary:
    """Insert solves whose event exists, in one transaction, and report counts."""
    solves = list(solves)
    total = len(solves)
    print(f"Starting insertion of {total} solves...")

    start = time.monotonic()
    last_update = start

    with conn.cursor() as cursor:
        cursor.execute("SELECT event_name FROM event")
        rows = cursor.fetchall()
    existing_events = {row[0] for row in rows}
    print(f"Found {len(rows)} existing event types in database")

    processed = 0
    skipped_unknown = 0
    skipped_duplicates = 0

    try:
        with conn.cursor() as cursor:
            cursor.execute("SET foreign_key_checks = 0")
            for batch_number, batch in enumerate(_chunks(solves, BATCH_SIZE), start=1):
                prep_start = time.monotonic()
                params = []
                for solve in batch:
                    name = event_name(solve.puzzle)
                    if name not in existing_events:
                        skipped_unknown += 1
                        continue
                    params.append(
                        (
                            name,
                            solve.time,
                            solve.scramble,
                            solve.date.strftime(DATE_FORMAT),
                            solve.category,
                            penalty_code(solve.penalty),
                            solve.comment,
                        )
                    )
                processed += len(params)
                prep_time = time.monotonic() - prep_start

                if not params:
                    continue

                insert_start = time.monotonic()
                cursor.executemany(INSERT_SOLVE_SQL, params)
                affected = max(cursor.rowcount or 0, 0)
                if affected < len(params):
                    skipped_duplicates += len(params) - affected
                insert_time = time.monotonic() - insert_start

                now = time.monotonic()
                elapsed = now - start
                rate = _rate(processed, elapsed)
                remaining = max(total - processed, 0)
                eta = remaining / rate if rate > 0 else 0.0
                progress = processed / total * 100.0 if total else 100.0
                if now - last_update >= PROGRESS_INTERVAL:
                    print(
                        f"Batch {batch_number}: Processed {processed} rows ({progress:.1f}%) "
                        f"| Rate: {rate:.0f} rows/sec | Time: {format_duration(elapsed)} "
                        f"| ETA: {format_duration(eta)} | Prep: {prep_time:.2f}s "
                        f"| Insert: {insert_time:.2f}s"
                    )
                    last_update = now
            cursor.execute("SET foreign_key_checks = 1")
        conn.commit()
    except Exception:
        conn.rollback()
        raise

    summary = ImportSummary(
        total=total,
        processed=processed,
        skipped_duplicates=skipped_duplicates,
        skipped_unknown=skipped_unknown,
        elapsed=time.monotonic() - start,
    )
    print(_RULE)
    print("IMPORT SUMMARY:")
    print(_RULE)
    print(f"Total solves in CSV:       {summary.total}")
    print(f"Total solves processed:    {summary.processed}")
    print(f"New inserts:               {summary.new_inserts}")
    print(f"Skipped (duplicates):      {summary.skipped_duplicates}")
    print(f"Skipped (unknown events):  {summary.skipped_unknown}")
    print(f"Total skipped:             {summary.total_skipped}")
    print(f"Total time:                {format_duration(summary.elapsed)}")
    print(f"Average speed:             {_rate(processed, summary.elapsed):.0f} rows/second")
    print(_RULE)
    return summary


def import_twistytimer_csv(file_path: str | os.PathLike[str]) -> ImportSummary:
    """Parse a TwistyTimer CSV file and insert its solves into the database."""
    print(_BANNER)
    print(f"Starting import from: {file_path}")
    print(_BANNER)

    parse_start = time.monotonic()
    solves = parse_twistytimer(file_path)
    parse_time = time.monotonic() - parse_start
    print(
        f"Parsed {len(solves)} solves in {parse_time:.2f}s "
        f"({_rate(len(solves), parse_time):.0f} rows/sec)"
    )

    conn_start = time.monotonic()
    conn = get_conn()
    print(f"Connected to database in {time.monotonic() - conn_start:.2f}s")

    try:
        summary = insert_solves(conn, solves)
    finally:
        conn.close()

    print(_BANNER)
    print("Import completed successfully!")
    print(_BANNER)
    return summary
"""Command that imports a TwistyTimer CSV export into the database."""

from __future__ import annotations

import sys

import pymysql
from dotenv import find_dotenv, load_dotenv

from .database import import_twistytimer_csv
from .models import TwistyTimerError

DEFAULT_PATH = "data/twistytimer.csv"


def main(argv: list[str] | None = None) -> int:
    """Import the CSV file named by the first argument; return an exit status."""
    load_dotenv(find_dotenv(usecwd=True))
    args = sys.argv[1:] if argv is None else argv
    file_path = args[0] if args else DEFAULT_PATH

    try:
        import_twistytimer_csv(file_path)
    except (TwistyTimerError, OSError, KeyError, pymysql.MySQLError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    print("Successfully imported TwistyTimer data to database")
    return 0


if __name__ == "__main__":
    sys.exit(main())
"""Reading TwistyTimer CSV exports."""

from __future__ import annotations

import csv
import os
from collections.abc import Iterable, Iterator
from typing import TextIO

from .models import CsvRecordError, Solve, TwistyTimerError


def _nonblank(rows: Iterable[list[str]]) -> Iterator[list[str]]:
    return (row for row in rows if row)


def read_solves(stream: Iterable[str]) -> list[Solve]:
    """Read every solve from CSV text whose first row names the columns."""
    rows = csv.reader(stream)
    try:
        header = [name.strip() for name in next(rows)]
    except StopIteration:
        return []

    solves: list[Solve] = []
    index = 0
    try:
        for index, row in enumerate(_nonblank(rows), start=1):
            fields = [field.strip() for field in row]
            if len(fields) != len(header):
                raise CsvRecordError(
                    index,
                    csv.Error(
                        f"found record with {len(fields)} fields, "
                        f"but the previous record has {len(header)} fields"
                    ),
                )
            try:
                solves.append(Solve.from_row(dict(zip(header, fields))))
            except TwistyTimerError as err:
                raise CsvRecordError(index, err) from err
    except csv.Error as err:
        raise CsvRecordError(index + 1, err) from err
    return solves


def parse_twistytimer(path: str | os.PathLike[str]) -> list[Solve]:
    """Read every solve from a TwistyTimer CSV file."""
    stream: TextIO
    with open(path, newline="", encoding="utf-8") as stream:
        return read_solves(stream)
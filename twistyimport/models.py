"""Solve records exported by TwistyTimer and the parsing of their fields."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

_I64_MAX = 2**63 - 1
_U32_MAX = 2**32 - 1
_MAX_TIMESTAMP_MILLIS = _I64_MAX // 1_000_000
MAX_REASONABLE_TIME = 24 * 60 * 60 * 1000

_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT = re.compile(r"\+?[0-9]+")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Puzzle(str, Enum):
    """Puzzles and events known to TwistyTimer."""

    CUBE_222 = "222"
    CUBE_333 = "333"
    CUBE_444 = "444"
    CUBE_555 = "555"
    CUBE_666 = "666"
    CUBE_777 = "777"
    SQ1 = "sq1"
    SKEWB = "skewb"
    CLOCK = "clock"
    PYRA = "pyra"
    MEGA = "mega"
    BLD_3 = "3bld"
    FMC = "fmc"
    OH = "oh"
    BLD_4 = "4bld"
    BLD_5 = "5bld"
    MULTI_BLD = "multi"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UnknownPuzzle:
    """A puzzle name that TwistyTimer uses but this package does not know."""

    name: str

    def __str__(self) -> str:
        return f"unknown:{self.name}"


class TwistyTimerError(Exception):
    """Base class for errors met while reading TwistyTimer data."""


class EmptyPuzzleType(TwistyTimerError):
    def __init__(self) -> None:
        super().__init__("Empty puzzle type")


class InvalidTimestamp(TwistyTimerError):
    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid timestamp: {text}")
        self.text = text


class TimestampParseError(TwistyTimerError):
    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"Failed to parse timestamp '{text}': {reason}")
        self.text = text
        self.reason = reason


class MissingField(TwistyTimerError):
    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}")
        self.field = field


class InvalidTimeValue(TwistyTimerError):
    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid time value: {text}")
        self.text = text


class CsvRecordError(TwistyTimerError):
    def __init__(self, index: int, cause: Exception) -> None:
        super().__init__(f"CSV error at record {index}: {cause}")
        self.index = index
        self.cause = cause


def parse_puzzle(text: str) -> Puzzle | UnknownPuzzle:
    """Turn a puzzle name into a Puzzle, or an UnknownPuzzle for other names."""
    name = text.strip().lower()
    if not name:
        raise EmptyPuzzleType()
    try:
        return Puzzle(name)
    except ValueError:
        return UnknownPuzzle(name)


def parse_date(text: str) -> datetime:
    """Turn milliseconds since the Unix epoch into a UTC datetime."""
    if not text.strip():
        raise MissingField("date")
    if not _SIGNED_INT.fullmatch(text):
        raise TimestampParseError(text, "invalid digit found in string")
    millis = int(text)
    if not -_I64_MAX - 1 <= millis <= _I64_MAX:
        reason = "number too large to fit in target type" if millis > 0 else "number too small to fit in target type"
        raise TimestampParseError(text, reason)
    if not 0 <= millis <= _MAX_TIMESTAMP_MILLIS:
        raise InvalidTimestamp(text)
    return _EPOCH + timedelta(milliseconds=millis)


def parse_time(text: str) -> int:
    """Turn a solve time in milliseconds into an int, rejecting absurd values."""
    if not text.strip():
        raise MissingField("time")
    if not _UNSIGNED_INT.fullmatch(text):
        raise InvalidTimeValue(text)
    value = int(text)
    if value > _U32_MAX:
        raise InvalidTimeValue(text)
    if value > MAX_REASONABLE_TIME:
        raise InvalidTimeValue(f"{text} (unreasonably large)")
    return value


@dataclass(frozen=True)
class Solve:
    """A single solve as recorded by TwistyTimer."""

    puzzle: Puzzle | UnknownPuzzle
    category: str
    time: int
    date: datetime
    scramble: str
    penalty: str
    comment: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, str | None]) -> Solve:
        """Build a solve from a mapping of column names to field text."""

        def required(name: str) -> str:
            value = row.get(name)
            if value is None:
                raise MissingField(name)
            return value

        return cls(
            puzzle=parse_puzzle(required("puzzle")),
            category=required("category"),
            time=parse_time(required("time")),
            date=parse_date(required("date")),
            scramble=required("scramble"),
            penalty=required("penalty"),
            comment=row.get("comment") or "",
        )
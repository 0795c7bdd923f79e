"""Adapter for plain-text ledger dumps (text extracted from a statement PDF).

A logical entry spans several physical lines and has no field delimiters:

    12/05/2024   2024-0123   Overschrijving   BE12 3456 7890 1234   -1.250,00 EUR
    ACME NV
    Stationsstraat 1
    9000 Gent
    Mededeling: factuur 42
    Info: extra informatie

Lines are classified by an ordered list of patterns (first match wins):

1. record start: date, number, type token, IBAN-shaped counterparty, amount
2. malformed record start: date, number, free text, amount
3. ``Mededeling:`` message line (only while a record is open)
4. ``Info:`` info line (only while a record is open)
5. anything else: a name/address line when slots are pending, else dropped

Fields are filled through :class:`~bank_statements.record.RecordBuilder`, in
order. The three lines after a record start are name, address line 1 and
address line 2. A message line pads the address slots that were not seen. An
info line does not pad: when no message line preceded it, its text lands in
the ``message`` field.

Dates and numbers must carry the accounting year, which is the previous
calendar year during January to March. Lines stamped with another year never
start a record.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from datetime import date, datetime
from enum import StrEnum
from typing import NamedTuple

from ...logging_setup import get_logger
from ...record import Record, RecordBuilder

_logger = get_logger("bank_statements.ingest.adapters.ledger_text")

# Number of lines following a record start that hold name, address 1 and address 2.
HEADER_LINES_AFTER_START = 3
LEDGER_DATE_FORMAT = "%d/%m/%Y"


def accounting_year(reference_date: date) -> int:
    """Return the accounting year in effect on ``reference_date``.

    Statements for a year are still exported during its first quarter of the
    next, so January to March map to the previous calendar year.
    """

    if reference_date.month <= 3:
        return reference_date.year - 1
    return reference_date.year


class LineKind(StrEnum):
    BLANK = "blank"
    RECORD = "record"
    MALFORMED = "malformed"
    MESSAGE = "message"
    INFO = "info"
    PLAIN = "plain"


class LineMatch(NamedTuple):
    kind: LineKind
    groups: tuple[str, ...] = ()


class LedgerPatterns:
    """Compiled line patterns for a single accounting year."""

    def __init__(self, year: int) -> None:
        self.year = year
        start = rf"^\s*(\d+/\d+/{year})\s+({year}-\d+)\s+"
        self.record = re.compile(
            start + r"([^\W\d_]+)\s+([A-Z]{2}\d{2} \d{4} \d{4} \d{4})\s+([\d.,+-]*)\s+EUR\s*$",
            re.IGNORECASE,
        )
        self.malformed = re.compile(start + r"(.+)\s+([\d.,+-]*)\s+EUR\s*$", re.IGNORECASE)
        self.message = re.compile(r"Mededeling:\s*(.*)$", re.IGNORECASE)
        self.info = re.compile(r"Info:\s*(.*)$", re.IGNORECASE)

    def classify(self, line: str, *, record_open: bool = True) -> LineMatch:
        """Classify one physical line (without its line terminator)."""

        if not line.strip():
            return LineMatch(LineKind.BLANK)
        m = self.record.search(line)
        if m:
            return LineMatch(LineKind.RECORD, m.groups())
        m = self.malformed.search(line)
        if m:
            return LineMatch(LineKind.MALFORMED, m.groups())
        if record_open:
            m = self.message.search(line)
            if m:
                return LineMatch(LineKind.MESSAGE, m.groups())
            m = self.info.search(line)
            if m:
                return LineMatch(LineKind.INFO, m.groups())
        return LineMatch(LineKind.PLAIN, (line.rstrip(),))


def classify_line(line: str, *, year: int, record_open: bool = True) -> LineMatch:
    return LedgerPatterns(year).classify(line, record_open=record_open)


def _strip_thousands(amount: str) -> str:
    return amount.replace(".", "")


def _parse_date(token: str) -> date | str:
    try:
        return datetime.strptime(token, LEDGER_DATE_FORMAT).date()
    except ValueError:
        _logger.debug("keeping invalid ledger date %r as text", token)
        return token


class LedgerParser:
    """Reconstruct records from the lines of a plain-text ledger dump.

    ``reference_date`` fixes the accounting year for the whole run (defaults
    to today when omitted).
    """

    def __init__(self, reference_date: date | None = None) -> None:
        self.reference_date = reference_date or date.today()
        self.patterns = LedgerPatterns(accounting_year(self.reference_date))

    @property
    def year(self) -> int:
        return self.patterns.year

    def parse(self, lines: Iterable[str]) -> Iterator[Record]:
        if lines is None:
            raise TypeError("lines must not be None")
        return self._iter_records(lines)

    def _iter_records(self, lines: Iterable[str]) -> Iterator[Record]:
        builder: RecordBuilder | None = None
        pending = 0

        for lineno, raw in enumerate(lines, start=1):
            line = raw.rstrip("\r\n")
            match = self.patterns.classify(line, record_open=builder is not None)

            if match.kind is LineKind.BLANK:
                continue

            if match.kind is LineKind.RECORD:
                if builder is not None and not builder.is_empty:
                    yield builder.build()
                date_token, number, type_token, counterparty, amount = match.groups
                builder = RecordBuilder()
                builder.append(_parse_date(date_token))
                builder.append(number)
                builder.append(type_token)
                builder.append(counterparty)
                builder.append(_strip_thousands(amount))
                pending = HEADER_LINES_AFTER_START
                _logger.debug("line %d: record %s", lineno, number)

            elif match.kind is LineKind.MALFORMED:
                if builder is not None and not builder.is_empty:
                    yield builder.build()
                date_token, number, text, amount = match.groups
                builder = RecordBuilder()
                builder.append(_parse_date(date_token))
                builder.append(number)
                builder.append(text)
                # No counterparty column on malformed lines.
                builder.pad(1)
                builder.append(_strip_thousands(amount))
                pending = HEADER_LINES_AFTER_START
                _logger.debug("line %d: malformed record %s", lineno, number)

            elif match.kind is LineKind.MESSAGE and builder is not None:
                builder.pad(pending)
                builder.append(match.groups[0])
                pending = 0

            elif match.kind is LineKind.INFO and builder is not None:
                if builder.next_field != "info":
                    _logger.debug(
                        "line %d: info text stored in %s", lineno, builder.next_field
                    )
                builder.append(match.groups[0])
                pending = 0

            elif builder is not None and pending > 0:
                builder.append(match.groups[0])
                pending -= 1

            else:
                _logger.debug("line %d: dropped", lineno)

        if builder is not None and not builder.is_empty:
            yield builder.build()


def parse_ledger(lines: Iterable[str], *, reference_date: date | None = None) -> Iterator[Record]:
    """Parse ledger lines with a fresh :class:`LedgerParser`."""

    return LedgerParser(reference_date).parse(lines)


__all__ = [
    "HEADER_LINES_AFTER_START",
    "LedgerParser",
    "LedgerPatterns",
    "LineKind",
    "LineMatch",
    "accounting_year",
    "classify_line",
    "parse_ledger",
]

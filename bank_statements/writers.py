"""Delimited-text serialization of :class:`~bank_statements.record.Record` values.

Columns (exact order)::

    Datum;Nummer;Type;Tegenpartij;Bedrag;Munt;Naam;Adres1;Adres2;Adres3;Mededeling;Info

Dates render as ``dd/mm/yyyy``, ``Decimal`` amounts with exactly two decimals
and ``None`` as an empty cell. Address lines past the third are folded into
the ``Adres3`` column.
"""

from __future__ import annotations

import csv
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, TextIO

from .record import Record

HEADER: tuple[str, ...] = (
    "Datum",
    "Nummer",
    "Type",
    "Tegenpartij",
    "Bedrag",
    "Munt",
    "Naam",
    "Adres1",
    "Adres2",
    "Adres3",
    "Mededeling",
    "Info",
)
ADDRESS_COLUMNS = 3
DEFAULT_SEPARATOR = ";"
DATE_FORMAT = "%d/%m/%Y"


def _fmt_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, Decimal):
        return f"{value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):.2f}"
    return str(value)


def _address_cells(address: tuple[str, ...]) -> list[str]:
    cells = list(address[: ADDRESS_COLUMNS - 1])
    rest = address[ADDRESS_COLUMNS - 1 :]
    if rest:
        cells.append(", ".join(rest))
    cells.extend([""] * (ADDRESS_COLUMNS - len(cells)))
    return cells


def record_to_row(record: Record) -> list[str]:
    return [
        _fmt_value(record.date),
        _fmt_value(record.number),
        _fmt_value(record.type),
        _fmt_value(record.counterparty),
        _fmt_value(record.amount),
        _fmt_value(record.currency),
        _fmt_value(record.name),
        *_address_cells(record.address),
        _fmt_value(record.message),
        _fmt_value(record.info),
    ]


class CsvRecordWriter:
    """Write a header and one delimited row per record to a text stream."""

    def __init__(self, output: TextIO, *, separator: str = DEFAULT_SEPARATOR) -> None:
        if output is None:
            raise TypeError("output must not be None")
        if len(separator) != 1:
            raise ValueError(f"separator must be a single character: {separator!r}")
        self._writer = csv.writer(output, delimiter=separator, lineterminator="\n")
        self.rows_written = 0

    def write_header(self) -> None:
        self._writer.writerow(HEADER)

    def write_record(self, record: Record) -> None:
        self._writer.writerow(record_to_row(record))
        self.rows_written += 1


__all__ = ["ADDRESS_COLUMNS", "CsvRecordWriter", "DEFAULT_SEPARATOR", "HEADER", "record_to_row"]

"""Public API for converting bank statement files.

:func:`parse_statement` streams normalized records from a camt.053 XML file
or a plain-text ledger dump; :func:`convert_statement` writes them to a
delimited text file. Adapter selection lives in
:mod:`bank_statements.ingest.utils`.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from os import PathLike
from pathlib import Path

from .ingest.utils import StatementKind, detect_statement_kind, iter_records_from_path
from .logging_setup import get_logger
from .record import Record
from .writers import DEFAULT_SEPARATOR, CsvRecordWriter

_logger = get_logger("bank_statements.api")

_OUTPUT_SUFFIX = {
    StatementKind.CAMT053: "_xml.csv",
    StatementKind.LEDGER: "_txt.csv",
}


def parse_statement(
    path: str | PathLike[str],
    *,
    kind: StatementKind | None = None,
    reference_date: date | None = None,
) -> Iterator[Record]:
    """Return a lazy iterator of records read from ``path``.

    ``kind`` overrides extension-based detection. ``reference_date`` fixes
    the accounting year used by the ledger adapter (defaults to today).
    """

    if path is None:
        raise TypeError("path must not be None")
    return iter_records_from_path(path, kind=kind, reference_date=reference_date)


def default_output_path(
    path: str | PathLike[str], *, kind: StatementKind | None = None
) -> Path:
    """``statements.xml`` -> ``statements_xml.csv``; ledger text -> ``<stem>_txt.csv``."""

    p = Path(path)
    return p.with_name(p.stem + _OUTPUT_SUFFIX[kind or detect_statement_kind(p)])


def convert_statement(
    input_path: str | PathLike[str],
    output_path: str | PathLike[str] | None = None,
    *,
    kind: StatementKind | None = None,
    separator: str = DEFAULT_SEPARATOR,
    reference_date: date | None = None,
) -> int:
    """Convert one statement file and return the number of records written.

    The output (UTF-8) is only created once the input has been opened, so a
    missing input does not leave an empty file behind.
    """

    if len(separator) != 1:
        raise ValueError(f"separator must be a single character: {separator!r}")
    resolved = kind or detect_statement_kind(input_path)
    out = Path(output_path) if output_path is not None else default_output_path(
        input_path, kind=resolved
    )
    records = parse_statement(input_path, kind=resolved, reference_date=reference_date)

    # Pull the first record before opening the output so read errors surface early.
    first = next(records, None)
    with out.open("w", encoding="utf-8", newline="") as f:
        writer = CsvRecordWriter(f, separator=separator)
        writer.write_header()
        if first is not None:
            writer.write_record(first)
            for record in records:
                writer.write_record(record)

    _logger.info("wrote %d records from %s to %s", writer.rows_written, input_path, out)
    return writer.rows_written


__all__ = ["convert_statement", "default_output_path", "parse_statement"]

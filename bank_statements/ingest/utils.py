"""Ingest utilities shared by the API and the CLI.

Selects the adapter for a statement file and streams its records. The kind is
taken from the file extension unless given explicitly: ``.xml`` files are
camt.053 statements, everything else is treated as a plain-text ledger dump.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from enum import StrEnum
from os import PathLike
from pathlib import Path

from ..logging_setup import get_logger
from ..record import Record

_logger = get_logger("bank_statements.ingest.utils")


class StatementKind(StrEnum):
    CAMT053 = "camt053"
    LEDGER = "ledger"


def detect_statement_kind(path: str | PathLike[str]) -> StatementKind:
    if Path(path).suffix.lower() == ".xml":
        return StatementKind.CAMT053
    return StatementKind.LEDGER


def iter_records_from_path(
    path: str | PathLike[str],
    *,
    kind: StatementKind | None = None,
    reference_date: date | None = None,
) -> Iterator[Record]:
    """Yield records from a statement file, reading it lazily where possible.

    The camt.053 document is loaded in full before the first record is
    produced; ledger files are read one line at a time.
    """

    from .adapters.camt053_xml import parse_camt053
    from .adapters.ledger_text import LedgerParser

    p = Path(path)
    resolved = kind or detect_statement_kind(p)
    _logger.info("reading %s statement %s", resolved, p)

    if resolved is StatementKind.CAMT053:
        yield from parse_camt053(p)
        return

    parser = LedgerParser(reference_date)
    # utf-8-sig drops a leading BOM left by PDF-to-text tools.
    with p.open(encoding="utf-8-sig", newline="") as f:
        yield from parser.parse(f)


__all__ = ["StatementKind", "detect_statement_kind", "iter_records_from_path"]

"""Public interface for the ``bank_statements`` package.

This module re-exports the API functions, the record model and the two
statement adapters as the stable import surface. There is no runtime logic
here, only symbol re-exports.
"""

from .api import convert_statement, default_output_path, parse_statement
from .formatting import format_iban, format_structured_reference
from .ingest.adapters.camt053_xml import Camt053Parser, parse_camt053
from .ingest.adapters.ledger_text import LedgerParser, accounting_year, parse_ledger
from .ingest.camt053_model import load_document
from .ingest.utils import StatementKind, detect_statement_kind
from .record import Record, RecordBuilder
from .transaction_codes import translate_bank_transaction_code, translate_transaction_code
from .writers import CsvRecordWriter

__all__ = [
    # API
    "convert_statement",
    "default_output_path",
    "parse_statement",
    # Adapters
    "Camt053Parser",
    "LedgerParser",
    "accounting_year",
    "load_document",
    "parse_camt053",
    "parse_ledger",
    "StatementKind",
    "detect_statement_kind",
    # Models / helpers
    "Record",
    "RecordBuilder",
    "CsvRecordWriter",
    "format_iban",
    "format_structured_reference",
    "translate_bank_transaction_code",
    "translate_transaction_code",
]

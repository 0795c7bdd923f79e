"""Adapter mapping a camt.053 statement tree to :class:`~bank_statements.record.Record`.

Mapping rules (per ``Ntry``)
----------------------------
- ``date``: booking date (``BookgDt``)
- ``number``: ``NtryRef``
- ``type``: label of ``BkTxCd/Domn`` (see :mod:`bank_statements.transaction_codes`)
- ``currency``: ``Amt/@Ccy``
- debit entries: counterparty, name and address come from the creditor side
  and the amount is negated; credit entries use the debtor side with a
  positive amount
- ``message``: the structured creditor reference (``+++ddd/dddd/ddddd+++``)
  when present, otherwise the first non-blank line of the unstructured text;
  remaining lines go to ``info`` joined with ``", "``
- a mandate id is appended to ``info`` as ``"Mandaatreferte: <id>"``
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from ...formatting import format_iban, format_structured_reference
from ...logging_setup import get_logger
from ...record import Record
from ...transaction_codes import translate_bank_transaction_code
from ..camt053_model import (
    CashAccount,
    CreditDebit,
    Document,
    Entry,
    Party,
    RemittanceInformation,
    XmlSource,
    load_document,
)

_logger = get_logger("bank_statements.ingest.adapters.camt053_xml")

MANDATE_REFERENCE_LABEL = "Mandaatreferte"
INFO_SEPARATOR = ", "
_LINE_BREAK_RE = re.compile(r"[\r\n]")


def _iban(account: CashAccount | None) -> str | None:
    return format_iban(account.iban) if account is not None else None


def _address(party: Party | None) -> tuple[str, ...]:
    if party is None or party.postal_address is None:
        return ()
    return party.postal_address.address_lines


def _remittance_fields(info: RemittanceInformation | None) -> tuple[str | None, str | None]:
    """Return ``(message, info)`` extracted from remittance information."""

    if info is None:
        return None, None
    if info.structured is not None and info.structured.creditor_reference is not None:
        return format_structured_reference(info.structured.creditor_reference.reference), None
    if info.unstructured is None:
        return None, None
    lines = [s.strip() for s in _LINE_BREAK_RE.split(info.unstructured)]
    lines = [s for s in lines if s]
    message = lines[0] if lines else None
    extra = INFO_SEPARATOR.join(lines[1:]) if len(lines) > 1 else None
    return message, extra


def entry_to_record(entry: Entry) -> Record:
    """Translate a single statement entry into a record."""

    details = entry.details
    parties = details.related_parties if details is not None else None
    direction = entry.direction
    magnitude = entry.amount.value if entry.amount is not None else None

    if direction is CreditDebit.DEBIT:
        party = parties.creditor if parties is not None else None
        account = parties.creditor_account if parties is not None else None
        amount = -magnitude if magnitude is not None else None
    else:
        if direction is CreditDebit.UNKNOWN:
            _logger.warning(
                "entry %r has unknown credit/debit indicator %r; treating as credit",
                entry.reference,
                entry.credit_debit,
            )
        party = parties.debtor if parties is not None else None
        account = parties.debtor_account if parties is not None else None
        amount = magnitude

    message, info = _remittance_fields(
        details.remittance_information if details is not None else None
    )

    refs = details.references if details is not None else None
    if refs is not None and refs.mandate_id is not None:
        mandate = f"{MANDATE_REFERENCE_LABEL}: {refs.mandate_id}"
        info = f"{info}{INFO_SEPARATOR}{mandate}" if info else mandate

    return Record(
        date=entry.booking_date,
        number=entry.reference,
        type=translate_bank_transaction_code(entry.bank_transaction_code),
        counterparty=_iban(account),
        amount=amount,
        currency=entry.amount.currency if entry.amount is not None else None,
        name=party.name if party is not None else None,
        address=_address(party),
        message=message,
        info=info,
    )


class Camt053Parser:
    """Yield one record per ``Ntry`` across all statements of a document.

    Usage
    -----
    records = Camt053Parser().parse(load_document(path))  # -> Iterator[Record]
    """

    def parse(self, document: Document | None) -> Iterator[Record]:
        message = document.statement_message if document is not None else None
        if message is None:
            return
        for statement in message.statements:
            _logger.debug(
                "statement %r: %d entries", statement.id, len(statement.entries)
            )
            for entry in statement.entries:
                yield entry_to_record(entry)


def parse_camt053(source: XmlSource) -> Iterator[Record]:
    """Load a camt.053 XML source and return its records lazily."""

    return Camt053Parser().parse(load_document(source))


__all__ = ["Camt053Parser", "MANDATE_REFERENCE_LABEL", "entry_to_record", "parse_camt053"]

"""Typed node shapes for a camt.053 bank-to-customer statement and its XML binding.

Only the parts of the ISO 20022 message read by
:mod:`bank_statements.ingest.adapters.camt053_xml` are modelled. Every nested
node is optional: banks routinely omit related parties, remittance
information or references, and absence must never fail the conversion.

Binding matches elements by local name, so ``camt.053.001.02`` documents and
later revisions (different default namespace) load the same way.
"""

from __future__ import annotations

import os
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from os import PathLike
from typing import IO, Any, TypeAlias

from lxml import etree
from pydantic import BaseModel, ConfigDict

from ..logging_setup import get_logger

_logger = get_logger("bank_statements.ingest.camt053_model")


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)


class CreditDebit(StrEnum):
    CREDIT = "CRDT"
    DEBIT = "DBIT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, raw: str | None) -> CreditDebit:
        if not raw:
            return cls.UNKNOWN
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return cls.UNKNOWN


class PostalAddress(_Node):
    address_lines: tuple[str, ...] = ()


class Party(_Node):
    """Creditor or debtor (``Cdtr`` / ``Dbtr``)."""

    name: str | None = None
    postal_address: PostalAddress | None = None


class CashAccount(_Node):
    iban: str | None = None


class RelatedParties(_Node):
    creditor: Party | None = None
    creditor_account: CashAccount | None = None
    debtor: Party | None = None
    debtor_account: CashAccount | None = None


class CreditorReference(_Node):
    reference: str | None = None


class StructuredRemittance(_Node):
    creditor_reference: CreditorReference | None = None


class RemittanceInformation(_Node):
    structured: StructuredRemittance | None = None
    unstructured: str | None = None


class TransactionReferences(_Node):
    mandate_id: str | None = None


class TransactionDetails(_Node):
    references: TransactionReferences | None = None
    related_parties: RelatedParties | None = None
    remittance_information: RemittanceInformation | None = None


class Family(_Node):
    code: str | None = None
    sub_family_code: str | None = None


class Domain(_Node):
    code: str | None = None
    family: Family | None = None


class BankTransactionCode(_Node):
    domain: Domain | None = None


class Amount(_Node):
    value: Decimal
    currency: str | None = None


class Entry(_Node):
    reference: str | None = None
    amount: Amount | None = None
    credit_debit: str | None = None
    booking_date: date | None = None
    bank_transaction_code: BankTransactionCode | None = None
    details: TransactionDetails | None = None

    @property
    def direction(self) -> CreditDebit:
        return CreditDebit.parse(self.credit_debit)


class Statement(_Node):
    id: str | None = None
    entries: tuple[Entry, ...] = ()


class BankToCustomerStatement(_Node):
    statements: tuple[Statement, ...] = ()


class Document(_Node):
    statement_message: BankToCustomerStatement | None = None


# ---------------------------------------------------------------------------
# XML binding (lxml)
# ---------------------------------------------------------------------------

XmlSource: TypeAlias = str | PathLike[str] | bytes | IO[bytes]


def _children(el: Any, name: str) -> list[Any]:
    if el is None:
        return []
    return [c for c in el if isinstance(c.tag, str) and etree.QName(c).localname == name]


def _child(el: Any, *path: str) -> Any:
    for name in path:
        found = _children(el, name)
        if not found:
            return None
        el = found[0]
    return el


def _text(el: Any, *path: str) -> str | None:
    node = _child(el, *path)
    if node is None or node.text is None:
        return None
    return node.text


def _parse_datetime(raw: str | None, where: str) -> datetime | None:
    if raw is None or not raw.strip():
        return None
    try:
        return datetime.fromisoformat(raw.strip())
    except ValueError as exc:
        raise ValueError(f"invalid date/time in {where}: {raw!r}") from exc


def _parse_date_choice(el: Any, where: str) -> date | None:
    """Read a ``DateAndDateTimeChoice`` (``Dt`` or ``DtTm``)."""

    dt = _parse_datetime(_text(el, "DtTm"), where)
    if dt is not None:
        return dt.date()
    dt = _parse_datetime(_text(el, "Dt"), where)
    return dt.date() if dt is not None else None


def _bind_amount(el: Any) -> Amount | None:
    if el is None or el.text is None:
        return None
    try:
        value = Decimal(el.text.strip())
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount in Ntry/Amt: {el.text!r}") from exc
    return Amount(value=value, currency=el.get("Ccy"))


def _bind_party(el: Any) -> Party | None:
    if el is None:
        return None
    # camt.053.001.08+ nests the party under ``Pty``.
    inner = _child(el, "Pty")
    if inner is not None:
        el = inner
    addr = _child(el, "PstlAdr")
    postal = None
    if addr is not None:
        postal = PostalAddress(
            address_lines=tuple(
                line.text for line in _children(addr, "AdrLine") if line.text is not None
            ),
        )
    return Party(name=_text(el, "Nm"), postal_address=postal)


def _bind_cash_account(el: Any) -> CashAccount | None:
    if el is None:
        return None
    return CashAccount(iban=_text(el, "Id", "IBAN"))


def _bind_details(el: Any) -> TransactionDetails | None:
    if el is None:
        return None
    refs = _child(el, "Refs")
    parties = _child(el, "RltdPties")
    rmt = _child(el, "RmtInf")

    remittance = None
    if rmt is not None:
        strd = _child(rmt, "Strd")
        structured = None
        if strd is not None:
            cref = _child(strd, "CdtrRefInf")
            structured = StructuredRemittance(
                creditor_reference=(
                    CreditorReference(reference=_text(cref, "Ref")) if cref is not None else None
                )
            )
        ustrd = [u.text for u in _children(rmt, "Ustrd") if u.text]
        remittance = RemittanceInformation(
            structured=structured,
            unstructured="\n".join(ustrd) if ustrd else None,
        )

    return TransactionDetails(
        references=(
            TransactionReferences(mandate_id=_text(refs, "MndtId"))
            if refs is not None
            else None
        ),
        related_parties=(
            RelatedParties(
                creditor=_bind_party(_child(parties, "Cdtr")),
                creditor_account=_bind_cash_account(_child(parties, "CdtrAcct")),
                debtor=_bind_party(_child(parties, "Dbtr")),
                debtor_account=_bind_cash_account(_child(parties, "DbtrAcct")),
            )
            if parties is not None
            else None
        ),
        remittance_information=remittance,
    )


def _bind_entry(el: Any) -> Entry:
    code_el = _child(el, "BkTxCd")
    code = None
    if code_el is not None:
        domn = _child(code_el, "Domn")
        fmly = _child(domn, "Fmly")
        code = BankTransactionCode(
            domain=(
                Domain(
                    code=_text(domn, "Cd"),
                    family=(
                        Family(code=_text(fmly, "Cd"), sub_family_code=_text(fmly, "SubFmlyCd"))
                        if fmly is not None
                        else None
                    ),
                )
                if domn is not None
                else None
            ),
        )

    booking = _child(el, "BookgDt")

    return Entry(
        reference=_text(el, "NtryRef"),
        amount=_bind_amount(_child(el, "Amt")),
        credit_debit=_text(el, "CdtDbtInd"),
        booking_date=_parse_date_choice(booking, "BookgDt") if booking is not None else None,
        bank_transaction_code=code,
        # Only the first transaction of a batched entry carries counterparty details.
        details=_bind_details(_child(el, "NtryDtls", "TxDtls")),
    )


def _bind_statement(el: Any) -> Statement:
    return Statement(
        id=_text(el, "Id"),
        entries=tuple(_bind_entry(n) for n in _children(el, "Ntry")),
    )


def bind_document(root: Any) -> Document:
    """Bind an already parsed ``Document`` element into the node tree."""

    msg = _child(root, "BkToCstmrStmt")
    if msg is None:
        _logger.debug("document has no BkToCstmrStmt element")
        return Document()
    return Document(
        statement_message=BankToCustomerStatement(
            statements=tuple(_bind_statement(s) for s in _children(msg, "Stmt")),
        )
    )


def load_document(source: XmlSource) -> Document:
    """Parse camt.053 XML from a path, raw bytes or a binary file object.

    Raises ``ValueError`` when the XML is not well-formed or a typed value
    (amount, date) cannot be parsed.
    """

    if source is None:
        raise TypeError("source must not be None")
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        if isinstance(source, bytes):
            root = etree.fromstring(source, parser=parser)
        elif isinstance(source, (str, PathLike)):
            root = etree.parse(os.fspath(source), parser=parser).getroot()
        else:
            root = etree.parse(source, parser=parser).getroot()
    except etree.XMLSyntaxError as exc:
        raise ValueError(f"invalid camt.053 XML: {exc}") from exc
    if etree.QName(root).localname != "Document":
        raise ValueError(f"unexpected root element: {etree.QName(root).localname!r}")
    return bind_document(root)


__all__ = [
    "Amount",
    "BankToCustomerStatement",
    "BankTransactionCode",
    "CashAccount",
    "CreditDebit",
    "CreditorReference",
    "Document",
    "Domain",
    "Entry",
    "Family",
    "Party",
    "PostalAddress",
    "RelatedParties",
    "RemittanceInformation",
    "Statement",
    "StructuredRemittance",
    "TransactionDetails",
    "TransactionReferences",
    "bind_document",
    "load_document",
]

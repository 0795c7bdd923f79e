"""Normalized statement record and the ordered-append builder.

Both statement adapters emit :class:`Record` values. The record is a frozen
``dataclass`` with an explicit field order that matches the exported columns:

    - date: ``datetime.date`` (or the raw token when a ledger date is invalid)
    - number: entry reference
    - type: human-readable transaction type label
    - counterparty: account identifier of the other party
    - amount: signed ``Decimal`` (camt.053) or a textual token (ledger)
    - currency: only populated by the camt.053 adapter
    - name: counterparty display name
    - address: ordered address lines
    - message: remittance message
    - info: free-text annotation following the message

The plain-text ledger adapter cannot address fields by name because its input
has no delimiters; it fills them through :class:`RecordBuilder`, a cursor that
writes one slot at a time in ``LEDGER_FIELD_ORDER``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date as _date
from decimal import Decimal
from typing import Any, TypeAlias

from .logging_setup import get_logger

_logger = get_logger("bank_statements.record")

RecordDate: TypeAlias = _date | str
RecordAmount: TypeAlias = Decimal | str

RECORD_FIELDS: tuple[str, ...] = (
    "date",
    "number",
    "type",
    "counterparty",
    "amount",
    "currency",
    "name",
    "address",
    "message",
    "info",
)

LEDGER_FIELD_ORDER: tuple[str, ...] = (
    "date",
    "number",
    "type",
    "counterparty",
    "amount",
    "name",
    "address_line1",
    "address_line2",
    "message",
    "info",
)

# Placeholder written into slots the input skips, so later appends stay aligned.
EMPTY = ""


@dataclass(frozen=True, slots=True)
class Record:
    """A single normalized statement entry."""

    date: RecordDate | None = None
    number: str | None = None
    type: str | None = None
    counterparty: str | None = None
    amount: RecordAmount | None = None
    currency: str | None = None
    name: str | None = None
    address: tuple[str, ...] = ()
    message: str | None = None
    info: str | None = None

    def address_line(self, n: int) -> str | None:
        """Return the ``n``-th (1-based) address line, or ``None`` when absent."""

        if n < 1 or n > len(self.address):
            return None
        return self.address[n - 1]


class RecordBuilder:
    """Ordered field cursor used to assemble a :class:`Record` line by line.

    Every :meth:`append` fills the next unfilled slot of ``LEDGER_FIELD_ORDER``
    and advances the cursor; there is no random access. Callers that need to
    skip a slot must :meth:`pad` it with an empty placeholder, otherwise all
    following values shift into the wrong field.
    """

    __slots__ = ("_index", "_values")

    def __init__(self) -> None:
        self._index = 0
        self._values: dict[str, Any] = {}

    @property
    def is_empty(self) -> bool:
        """True iff nothing has been appended yet."""

        return self._index == 0

    @property
    def next_field(self) -> str | None:
        if self._index >= len(LEDGER_FIELD_ORDER):
            return None
        return LEDGER_FIELD_ORDER[self._index]

    def append(self, value: Any) -> RecordBuilder:
        field = self.next_field
        if field is None:
            _logger.debug("record is full; dropping extra value %r", value)
        else:
            self._values[field] = value
        self._index += 1
        return self

    def pad(self, count: int) -> RecordBuilder:
        for _ in range(count):
            self.append(EMPTY)
        return self

    def build(self) -> Record:
        v = self._values
        address = tuple(
            v[key] for key in ("address_line1", "address_line2") if key in v
        )
        return Record(
            date=v.get("date"),
            number=v.get("number"),
            type=v.get("type"),
            counterparty=v.get("counterparty"),
            amount=v.get("amount"),
            name=v.get("name"),
            address=address,
            message=v.get("message"),
            info=v.get("info"),
        )


__all__ = [
    "EMPTY",
    "LEDGER_FIELD_ORDER",
    "RECORD_FIELDS",
    "Record",
    "RecordAmount",
    "RecordBuilder",
    "RecordDate",
]

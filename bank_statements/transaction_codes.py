"""Bank transaction code (domain / family / sub-family) to label translation.

The ISO 20022 ``BkTxCd/Domn`` triple is mapped onto the Dutch labels used in
the exported statement. Matching is case-insensitive. Unknown codes never
fail: a known domain with an unknown family yields ``"<DOMAIN>?"`` and an
unknown domain yields ``"<DOMAIN>?"`` as well, so the column still shows what
the bank sent.
"""

from __future__ import annotations

from collections.abc import Mapping

from .ingest.camt053_model import BankTransactionCode
from .logging_setup import get_logger

_logger = get_logger("bank_statements.transaction_codes")

# Keys are "<FAMILY>/<SUB-FAMILY>" in upper case.
TRANSACTION_LABELS: Mapping[str, Mapping[str, str]] = {
    "PMNT": {
        "ICDT/ESCT": "Overschrijving",
        "IRCT/ESCT": "Instantoverschrijving",
        "RDDT/PMDD": "Domiciliëring",
        "CCRD/POSC": "Afrekening kredietkaart",
        "CCRD/POSD": "Betaling Bancontact",
        "MDOP/PMNT": "Afrekening factuur bank",
        "RCDT/ESCT": "Ontvangst",
        "RCDT/XBCT": "Internationale ontvangst",
    },
    "SECU": {
        "SETT/TRAD": "Aankoop",
        "CORP/DVCA": "Afrekening coupons",
    },
}


def translate_transaction_code(
    domain: str | None,
    family: str | None = None,
    sub_family: str | None = None,
) -> str | None:
    """Return the label for a bank transaction code.

    A blank or absent ``domain`` is returned as-is (``None`` stays ``None``).
    """

    code = domain.upper() if domain is not None else None
    if code is None or not code.strip():
        return code

    key = f"{family or ''}/{sub_family or ''}".upper()
    labels = TRANSACTION_LABELS.get(code)
    if labels is None:
        _logger.debug("unknown transaction domain %r", code)
        return f"{code}?"
    label = labels.get(key)
    if label is None:
        _logger.debug("unknown %s family %r", code, key)
        return f"{code}?"
    return label


def translate_bank_transaction_code(code: BankTransactionCode | None) -> str | None:
    """Translate a bound ``BkTxCd`` node; no domain means no label."""

    domain = code.domain if code is not None else None
    if domain is None:
        return None
    family = domain.family
    return translate_transaction_code(
        domain.code,
        family.code if family is not None else None,
        family.sub_family_code if family is not None else None,
    )


__all__ = [
    "TRANSACTION_LABELS",
    "translate_bank_transaction_code",
    "translate_transaction_code",
]

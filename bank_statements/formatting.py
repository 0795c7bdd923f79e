"""Display formatting for account numbers and structured references."""

from __future__ import annotations

IBAN_MIN_LENGTH = 16
STRUCTURED_REFERENCE_MIN_LENGTH = 12

_STRUCTURED_MARKER = "+++"
_STRUCTURED_SEPARATOR = "/"
# Separators follow the 3rd and 7th characters ("+++123/4567/89012+++").
_STRUCTURED_BREAKS = frozenset({2, 6})


def format_iban(iban: str | None) -> str | None:
    """Group an account number in blocks of four characters.

    Values shorter than ``IBAN_MIN_LENGTH`` (including empty and ``None``) are
    returned unchanged. No checksum validation is performed.
    """

    if not iban or len(iban) < IBAN_MIN_LENGTH:
        return iban
    return " ".join(iban[i : i + 4] for i in range(0, len(iban), 4))


def format_structured_reference(reference: str | None) -> str | None:
    """Render a structured creditor reference as ``+++ddd/dddd/ddddd+++``."""

    if not reference or len(reference) < STRUCTURED_REFERENCE_MIN_LENGTH:
        return reference
    parts = [_STRUCTURED_MARKER]
    for i, ch in enumerate(reference):
        parts.append(ch)
        if i in _STRUCTURED_BREAKS:
            parts.append(_STRUCTURED_SEPARATOR)
    parts.append(_STRUCTURED_MARKER)
    return "".join(parts)


__all__ = [
    "IBAN_MIN_LENGTH",
    "STRUCTURED_REFERENCE_MIN_LENGTH",
    "format_iban",
    "format_structured_reference",
]

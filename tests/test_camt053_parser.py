# ruff: noqa: E501
from datetime import date
from decimal import Decimal

import pytest

from bank_statements.ingest.adapters.camt053_xml import Camt053Parser, parse_camt053
from bank_statements.ingest.camt053_model import CreditDebit, Document, load_document
from bank_statements.record import Record

NS = "urn:iso:std:iso:20022:tech:xsd:camt.053.001.02"


def _doc(entries_xml: str, ns: str = NS) -> bytes:
    return (
        f'<Document xmlns="{ns}"><BkToCstmrStmt><Stmt><Id>1</Id>'
        f"{entries_xml}"
        "</Stmt></BkToCstmrStmt></Document>"
    ).encode()


def _entry(indicator: str, details: str = "", amount: str = "10.00") -> str:
    return (
        "<Ntry><NtryRef>R1</NtryRef>"
        f'<Amt Ccy="EUR">{amount}</Amt>'
        f"<CdtDbtInd>{indicator}</CdtDbtInd>"
        "<BookgDt><DtTm>2024-05-02T10:15:00</DtTm></BookgDt>"
        "<BkTxCd><Domn><Cd>PMNT</Cd><Fmly><Cd>ICDT</Cd><SubFmlyCd>ESCT</SubFmlyCd></Fmly></Domn></BkTxCd>"
        f"<NtryDtls><TxDtls>{details}</TxDtls></NtryDtls>"
        "</Ntry>"
    )


_PARTIES = (
    "<RltdPties>"
    "<Dbtr><Nm>Debtor</Nm><PstlAdr><AdrLine>D street</AdrLine></PstlAdr></Dbtr>"
    "<DbtrAcct><Id><IBAN>BE68539007547034</IBAN></Id></DbtrAcct>"
    "<Cdtr><Nm>Creditor</Nm><PstlAdr><AdrLine>C street</AdrLine><AdrLine>C city</AdrLine></PstlAdr></Cdtr>"
    "<CdtrAcct><Id><IBAN>BE71096123456769</IBAN></Id></CdtrAcct>"
    "</RltdPties>"
)


def test_sample_statement(data_dir):
    records = list(parse_camt053(data_dir / "camt053_sample.xml"))

    assert records == [
        Record(
            date=date(2024, 5, 2),
            number="2024-0101",
            type="Domiciliëring",
            counterparty="BE71 0961 2345 6769",
            amount=Decimal("-125.40"),
            currency="EUR",
            name="Energie NV",
            address=("Kaai 12", "2000 Antwerpen"),
            message="+++090/9337/55493+++",
            info="Mandaatreferte: MANDATE-77",
        ),
        Record(
            date=date(2024, 5, 25),
            number="2024-0102",
            type="Ontvangst",
            counterparty="NL91 ABNA 0417 1643 00",
            amount=Decimal("2500.00"),
            currency="EUR",
            name="Werkgever BV",
            address=("Markt 1",),
            message="Loon mei 2024",
            info="Periode 05/2024, Ref 884",
        ),
        Record(
            date=date(2024, 6, 1),
            number="2024-0103",
            type="ACMT?",
            counterparty=None,
            amount=Decimal("-3.50"),
            currency="EUR",
        ),
    ]


def test_debit_uses_creditor_side_and_negative_amount():
    (rec,) = parse_camt053(_doc(_entry("DBIT", _PARTIES)))
    assert rec.amount == Decimal("-10.00")
    assert rec.name == "Creditor"
    assert rec.counterparty == "BE71 0961 2345 6769"
    assert rec.address == ("C street", "C city")


def test_credit_uses_debtor_side_and_positive_amount():
    (rec,) = parse_camt053(_doc(_entry("crdt", _PARTIES)))
    assert rec.amount == Decimal("10.00")
    assert rec.name == "Debtor"
    assert rec.counterparty == "BE68 5390 0754 7034"
    assert rec.address == ("D street",)


def test_unknown_indicator_is_treated_as_credit(caplog):
    (rec,) = parse_camt053(_doc(_entry("XXXX", _PARTIES)))
    assert rec.amount == Decimal("10.00")
    assert rec.name == "Debtor"
    assert "unknown credit/debit indicator" in caplog.text


def test_structured_reference_wins_over_unstructured_text():
    rmt = (
        "<RmtInf><Ustrd>ignored</Ustrd>"
        "<Strd><CdtrRefInf><Ref>123456789012</Ref></CdtrRefInf></Strd></RmtInf>"
    )
    (rec,) = parse_camt053(_doc(_entry("DBIT", rmt)))
    assert rec.message == "+++123/4567/89012+++"
    assert rec.info is None


def test_mandate_is_appended_after_unstructured_info():
    details = (
        "<Refs><MndtId>M-1</MndtId></Refs>"
        "<RmtInf><Ustrd>first\r\nsecond\n\nthird</Ustrd></RmtInf>"
    )
    (rec,) = parse_camt053(_doc(_entry("DBIT", details)))
    assert rec.message == "first"
    assert rec.info == "second, third, Mandaatreferte: M-1"


def test_single_line_unstructured_has_no_info():
    (rec,) = parse_camt053(_doc(_entry("DBIT", "<RmtInf><Ustrd>  only  </Ustrd></RmtInf>")))
    assert rec.message == "only"
    assert rec.info is None


def test_missing_details_produce_nulls():
    entry = (
        "<Ntry><NtryRef>R9</NtryRef><CdtDbtInd>DBIT</CdtDbtInd>"
        "<BookgDt><Dt>2024-05-03</Dt></BookgDt></Ntry>"
    )
    (rec,) = parse_camt053(_doc(entry))
    assert rec == Record(date=date(2024, 5, 3), number="R9")


def test_later_schema_versions_are_read_by_local_name():
    ns = "urn:iso:std:iso:20022:tech:xsd:camt.053.001.08"
    parties = (
        "<RltdPties><Cdtr><Pty><Nm>Nested</Nm></Pty></Cdtr>"
        "<CdtrAcct><Id><IBAN>BE71096123456769</IBAN></Id></CdtrAcct></RltdPties>"
    )
    (rec,) = parse_camt053(_doc(_entry("DBIT", parties), ns=ns))
    assert rec.name == "Nested"
    assert rec.type == "Overschrijving"


def test_document_without_statements_yields_nothing():
    assert list(parse_camt053(f'<Document xmlns="{NS}"><BkToCstmrStmt/></Document>'.encode())) == []
    assert list(parse_camt053(f'<Document xmlns="{NS}"/>'.encode())) == []
    assert list(Camt053Parser().parse(Document())) == []


def test_statement_without_entries_yields_nothing():
    assert list(parse_camt053(_doc(""))) == []


def test_none_document_yields_nothing():
    assert list(Camt053Parser().parse(None)) == []


def test_unused_header_timestamps_are_not_validated():
    xml = (
        f'<Document xmlns="{NS}"><BkToCstmrStmt>'
        "<GrpHdr><MsgId>M1</MsgId><CreDtTm>not-a-timestamp</CreDtTm></GrpHdr>"
        "<Stmt><Id>1</Id><CreDtTm>31/02/2024</CreDtTm>"
        f"{_entry('CRDT')}"
        "</Stmt></BkToCstmrStmt></Document>"
    ).encode()
    records = list(parse_camt053(xml))
    assert [r.number for r in records] == ["R1"]
    assert records[0].date == date(2024, 5, 2)


def test_entry_direction_parsing():
    doc = load_document(_doc(_entry("dbit") + _entry("CRDT") + _entry("")))
    entries = doc.statement_message.statements[0].entries
    assert [e.direction for e in entries] == [
        CreditDebit.DEBIT,
        CreditDebit.CREDIT,
        CreditDebit.UNKNOWN,
    ]


def test_malformed_xml_raises_value_error():
    with pytest.raises(ValueError, match="invalid camt.053 XML"):
        load_document(b"<Document><BkToCstmrStmt>")


def test_invalid_amount_raises_value_error():
    with pytest.raises(ValueError, match="invalid amount"):
        load_document(_doc(_entry("DBIT", amount="ten")))


def test_unexpected_root_raises_value_error():
    with pytest.raises(ValueError, match="unexpected root element"):
        load_document(b"<Other/>")

from bank_statements.formatting import format_iban, format_structured_reference


def test_format_iban_groups_by_four():
    assert format_iban("BE00000000000000") == "BE00 0000 0000 0000"
    assert format_iban("NL91ABNA0417164300") == "NL91 ABNA 0417 1643 00"


def test_format_iban_short_values_pass_through():
    assert format_iban("BE0000000000000") == "BE0000000000000"  # 15 chars
    assert format_iban("") == ""
    assert format_iban(None) is None


def test_format_structured_reference():
    assert format_structured_reference("090933755493") == "+++090/9337/55493+++"


def test_format_structured_reference_long_input_keeps_tail():
    out = format_structured_reference("1234567890123")
    assert out.startswith("+++") and out.endswith("+++")
    assert out == "+++123/4567/890123+++"


def test_format_structured_reference_short_values_pass_through():
    assert format_structured_reference("12345678901") == "12345678901"
    assert format_structured_reference(None) is None

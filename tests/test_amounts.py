"""Tests for the fixed-point token amount codec and hex helpers"""

import pytest

from fhevmsdk.common.amounts import format_token_amount, from_hex, parse_token_amount, to_hex


class TestParseTokenAmount:

    def test_fractional_amount(self):
        assert parse_token_amount("10.5", 6) == 10500000

    def test_whole_amount(self):
        assert parse_token_amount("42", 6) == 42000000

    def test_default_decimals_is_six(self):
        assert parse_token_amount("1") == 1_000_000

    def test_extra_fraction_digits_are_truncated(self):
        assert parse_token_amount("1.1234567", 6) == 1123456

    def test_leading_dot_and_trailing_dot(self):
        assert parse_token_amount(".5", 6) == 500000
        assert parse_token_amount("3.", 2) == 300

    def test_zero_decimals(self):
        assert parse_token_amount("7.9", 0) == 7

    def test_negative_amount(self):
        assert parse_token_amount("-0.5", 6) == -500000

    def test_large_amount_is_exact(self):
        assert parse_token_amount("123456789012345678901234567890.123456789012345678", 18) == \
            123456789012345678901234567890123456789012345678

    @pytest.mark.parametrize("bad", ["", ".", "abc", "1.2.3", "1e5", "-", "1,5"])
    def test_malformed_input_raises(self, bad):
        with pytest.raises(ValueError):
            parse_token_amount(bad, 6)


class TestFormatTokenAmount:

    def test_fractional_amount(self):
        assert format_token_amount(10500000, 6) == "10.5"

    def test_whole_amount_has_no_point(self):
        assert format_token_amount(10000000, 6) == "10"

    def test_small_fraction_is_zero_padded(self):
        assert format_token_amount(1, 6) == "0.000001"

    def test_negative_amount(self):
        assert format_token_amount(-1500000, 6) == "-1.5"

    def test_zero(self):
        assert format_token_amount(0, 6) == "0"


@pytest.mark.parametrize("text,canonical", [
    ("10.50", "10.5"),
    ("10.00", "10"),
    ("0.000001", "0.000001"),
    ("123.456", "123.456"),
    ("7", "7"),
])
def test_round_trip_is_canonical(text, canonical):
    """format(parse(s)) strips trailing zeros and nothing else"""
    assert format_token_amount(parse_token_amount(text, 6), 6) == canonical


def test_hex_helpers():
    assert to_hex(b"\x00\xff\x10") == "0x00ff10"
    assert from_hex("0x00ff10") == b"\x00\xff\x10"
    assert from_hex("00ff10") == b"\x00\xff\x10"
    assert from_hex(b"\x01") == b"\x01"

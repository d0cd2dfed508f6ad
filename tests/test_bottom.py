import pytest

from utils.bottom import SEPARATOR, ZERO, decode, decode_group, encode, encode_byte


class TestEncode:
    def test_single_letter(self):
        assert encode("A") == "💖✨🥺👉👈"

    def test_zero_byte(self):
        assert encode_byte(0) == ZERO + SEPARATOR

    def test_largest_symbols_first(self):
        assert encode_byte(255) == "🫂💖🥺" + SEPARATOR
        assert encode_byte(3) == ",,," + SEPARATOR

    def test_multibyte_characters_encode_each_byte(self):
        assert encode("é").count(SEPARATOR) == 2

    def test_empty(self):
        assert encode("") == ""


class TestDecode:
    def test_single_letter(self):
        assert decode("💖✨🥺👉👈") == "A"

    def test_missing_trailing_separator(self):
        assert decode("💖✨🥺👉👈💖✨🥺") == "AA"

    def test_surrounding_whitespace(self):
        assert decode("  💖✨🥺👉👈\n") == "A"

    def test_unicode_text(self):
        text = "héllo 🐱"
        assert decode(encode(text)) == text

    def test_empty(self):
        assert decode("   ") == ""

    def test_invalid_symbol(self):
        with pytest.raises(ValueError, match="Invalid bottom symbol"):
            decode("hello")

    def test_empty_group(self):
        with pytest.raises(ValueError, match="Empty"):
            decode_group("")

    def test_out_of_range_group(self):
        with pytest.raises(ValueError, match="out of byte range"):
            decode_group("🫂🫂")

    def test_invalid_utf8(self):
        with pytest.raises(ValueError, match="UTF-8"):
            decode(encode_byte(255))

"""Unit tests for the Base64 field codec."""

import pytest

from realex_hpp.domain.codec import (
    check_charset,
    decode_mapping,
    decode_value,
    encode_mapping,
    encode_value,
)
from realex_hpp.domain.exceptions import DecodingError, EncodingError


class TestEncodeValue:
    """Tests for single value encoding."""

    def test_encode_ascii(self) -> None:
        """Test encoding a plain ASCII value."""
        assert encode_value("merch1") == "bWVyY2gx"

    def test_encode_utf8(self) -> None:
        """Test that non-ASCII text is encoded from its UTF-8 bytes."""
        assert encode_value("héllo €") == "aMOpbGxvIOKCrA=="

    def test_none_passes_through(self) -> None:
        """Test that None is not encoded."""
        assert encode_value(None) is None

    def test_empty_string(self) -> None:
        """Test that an empty string encodes to an empty string."""
        assert encode_value("") == ""

    def test_unencodable_value_raises_encoding_error(self) -> None:
        """Test that characters outside the charset raise EncodingError."""
        with pytest.raises(EncodingError, match="ascii"):
            encode_value("€", "ascii")


class TestDecodeValue:
    """Tests for single value decoding."""

    def test_decode_utf8(self) -> None:
        """Test decoding back to UTF-8 text."""
        assert decode_value("aMOpbGxvIOKCrA==") == "héllo €"

    def test_none_passes_through(self) -> None:
        """Test that None is not decoded."""
        assert decode_value(None) is None

    def test_invalid_base64_raises_decoding_error(self) -> None:
        """Test that characters outside the Base64 alphabet raise DecodingError."""
        with pytest.raises(DecodingError, match="not valid Base64"):
            decode_value("not base64!")

    def test_non_ascii_input_raises_decoding_error(self) -> None:
        """Test that non-ASCII input raises DecodingError."""
        with pytest.raises(DecodingError):
            decode_value("héllo")

    def test_invalid_utf8_bytes_raise_decoding_error(self) -> None:
        """Test that Base64 of bytes that are not UTF-8 is rejected."""
        # b"\xff\xfe" is not valid UTF-8
        with pytest.raises(DecodingError, match="utf-8"):
            decode_value("//4=")


class TestMappings:
    """Tests for encoding supplementary data style mappings."""

    def test_keys_unchanged_values_encoded(self) -> None:
        """Test that keys are kept and values encoded."""
        encoded = encode_mapping({"UDF1": "value1", "UDF2": "merch1"})

        assert encoded == {"UDF1": "dmFsdWUx", "UDF2": "bWVyY2gx"}

    def test_round_trip(self) -> None:
        """Test that decoding an encoded mapping recovers it."""
        data = {"a": "one", "b": "héllo €", "c": ""}

        assert decode_mapping(encode_mapping(data)) == data

    def test_empty_mapping(self) -> None:
        """Test that empty mappings stay empty."""
        assert encode_mapping({}) == {}
        assert decode_mapping({}) == {}

    def test_bad_value_names_the_key(self) -> None:
        """Test that a bad value reports its key."""
        with pytest.raises(DecodingError, match="UDF2"):
            decode_mapping({"UDF1": "dmFsdWUx", "UDF2": "***"})


class TestCheckCharset:
    """Tests for charset lookup."""

    def test_known_charset_is_normalised(self) -> None:
        """Test that charset names are normalised."""
        assert check_charset("UTF-8") == "utf-8"

    def test_unknown_charset_raises_encoding_error(self) -> None:
        """Test that an unknown charset raises EncodingError."""
        with pytest.raises(EncodingError, match="Unsupported character set"):
            check_charset("no-such-charset")

    def test_unknown_charset_custom_error(self) -> None:
        """Test that the caller can choose the error raised for an unknown charset."""
        with pytest.raises(DecodingError):
            check_charset("no-such-charset", DecodingError)

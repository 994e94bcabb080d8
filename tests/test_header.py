"""
Unit tests for the container header codec.
"""

import io

import pytest

from stegano_dct.errors import (
    FileNameTooLong,
    IncompleteHeader,
    InvalidContainerHeader,
    UnsupportedHeaderVersion,
)
from stegano_dct.header import (
    DATA_STAMP,
    HEADER_VERSION,
    Header,
    decode_header,
    encode_header,
    header_size,
    max_header_size,
)


class TestEncode:
    """Byte layout of encoded headers."""

    def test_concrete_layout(self):
        data = encode_header(10, b"a.txt", True, False)
        assert data == (
            DATA_STAMP
            + b"\x01"
            + bytes([0x0A, 0x00, 0x00, 0x00])
            + bytes([0x05, 0x01, 0x00])
            + b"a.txt"
        )

    def test_length_is_little_endian(self):
        data = encode_header(0x12345678)
        assert data[6:10] == bytes([0x78, 0x56, 0x34, 0x12])

    def test_str_file_name_is_utf8(self):
        data = encode_header(1, "ü.txt")
        assert data[10] == len("ü.txt".encode("utf-8"))
        assert data.endswith("ü.txt".encode("utf-8"))

    def test_no_file_name(self):
        data = encode_header(3, None)
        assert len(data) == 13
        assert data[10] == 0

    def test_file_name_too_long(self):
        with pytest.raises(FileNameTooLong) as exc:
            encode_header(1, b"x" * 256)
        assert exc.value.length == 256

    def test_file_name_at_limit(self):
        data = encode_header(1, b"x" * 255)
        assert data[10] == 255

    @pytest.mark.parametrize("length", [-1, 2 ** 32])
    def test_payload_length_out_of_range(self, length):
        with pytest.raises(ValueError):
            encode_header(length)


class TestDecode:
    """Parsing headers back from a stream."""

    def test_concrete_scenario(self):
        stream = io.BytesIO(encode_header(10, b"a.txt", True, False))
        header = decode_header(stream)
        assert header.payload_length == 10
        assert header.file_name == b"a.txt"
        assert header.file_name_length == 5
        assert header.compression is True
        assert header.encryption is False

    @pytest.mark.parametrize(
        "length,name,compression,encryption",
        [
            (0, b"", False, False),
            (1, b"a", True, True),
            (0xFFFFFFFF, b"n" * 255, False, True),
            (0x01000000, "日本.bin".encode("utf-8"), True, False),
        ],
    )
    def test_round_trip(self, length, name, compression, encryption):
        header = decode_header(io.BytesIO(encode_header(length, name, compression, encryption)))
        assert header == Header(length, name, compression, encryption)

    def test_fourth_length_byte_is_significant(self):
        header = decode_header(io.BytesIO(encode_header(0xFF000000)))
        assert header.payload_length == 0xFF000000

    def test_consumes_only_header(self):
        stream = io.BytesIO(encode_header(4, b"f") + b"DATA")
        decode_header(stream)
        assert stream.read() == b"DATA"

    def test_bad_stamp(self):
        data = b"XXXXX" + encode_header(10, b"a.txt")[5:]
        with pytest.raises(InvalidContainerHeader):
            decode_header(io.BytesIO(data))

    def test_bad_version_even_if_rest_parses(self):
        data = bytearray(encode_header(10, b"a.txt"))
        data[len(DATA_STAMP)] = HEADER_VERSION[0] + 1
        with pytest.raises(UnsupportedHeaderVersion):
            decode_header(io.BytesIO(bytes(data)))

    @pytest.mark.parametrize("cut", [0, 3, 5, 6, 9, 12, 14])
    def test_truncated(self, cut):
        data = encode_header(10, b"a.txt")[:cut]
        with pytest.raises(IncompleteHeader):
            decode_header(io.BytesIO(data))

    def test_nonzero_flag_other_than_one_is_false(self):
        data = bytearray(encode_header(1))
        data[11] = 2
        assert decode_header(io.BytesIO(bytes(data))).compression is False

    def test_invalid_utf8_name_still_decodes(self):
        header = decode_header(io.BytesIO(encode_header(1, b"\xff\xfe")))
        assert header.file_name == b"\xff\xfe"
        assert isinstance(header.name, str)


class TestSizes:
    """Header size helpers."""

    def test_header_size(self):
        assert header_size(Header(10, b"a.txt")) == 18
        assert Header(0).size == 13

    def test_max_header_size(self):
        assert max_header_size() == 13 + 256

    @pytest.mark.parametrize("n", [0, 1, 100, 255])
    def test_max_bounds_actual(self, n):
        header = Header(1, b"x" * n)
        assert max_header_size() >= header_size(header)
        assert header_size(header) == len(header.to_bytes())

    def test_header_is_immutable(self):
        header = Header(1, b"a")
        with pytest.raises(AttributeError):
            header.payload_length = 2

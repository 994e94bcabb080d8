"""Container header written in front of the payload.

Layout, in order:

    stamp (5) | version (1) | payload length (4, little-endian)
    | file name length (1) | compression (1) | encryption (1) | file name

The first 13 bytes are fixed; the file name length byte tells the reader how
much of the header remains.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Optional, Union

from .errors import (
    FileNameTooLong,
    IncompleteHeader,
    InvalidContainerHeader,
    UnsupportedHeaderVersion,
)

DATA_STAMP = b"SGDCT"
HEADER_VERSION = b"\x01"
FIXED_HEADER_LENGTH = 7
MAX_FILE_NAME_LENGTH = 255
# capacity planning reserves one byte more than the format can hold
ASSUMED_MAX_FILE_NAME_LENGTH = 256
MAX_PAYLOAD_LENGTH = 0xFFFFFFFF


@dataclass(frozen=True)
class Header:
    payload_length: int
    file_name: bytes = b""
    compression: bool = False
    encryption: bool = False

    def __post_init__(self):
        if len(self.file_name) > MAX_FILE_NAME_LENGTH:
            raise FileNameTooLong(len(self.file_name), MAX_FILE_NAME_LENGTH)
        if not 0 <= self.payload_length <= MAX_PAYLOAD_LENGTH:
            raise ValueError(f"Payload length {self.payload_length} does not fit in 32 bits")

    @classmethod
    def for_file(cls, payload_length: int, file_name: Optional[str], compression: bool = False, encryption: bool = False) -> "Header":
        raw = file_name.encode("utf-8") if file_name else b""
        return cls(payload_length, raw, compression, encryption)

    @property
    def file_name_length(self) -> int:
        return len(self.file_name)

    @property
    def name(self) -> str:
        return self.file_name.decode("utf-8", errors="replace")

    @property
    def size(self) -> int:
        return header_size(self)

    def to_bytes(self) -> bytes:
        return (
            DATA_STAMP
            + HEADER_VERSION
            + self.payload_length.to_bytes(4, "little")
            + bytes(
                [
                    self.file_name_length,
                    1 if self.compression else 0,
                    1 if self.encryption else 0,
                ]
            )
            + self.file_name
        )


def encode_header(payload_length: int, file_name: Union[bytes, str, None] = b"", compression: bool = False, encryption: bool = False) -> bytes:
    if isinstance(file_name, str):
        file_name = file_name.encode("utf-8")
    return Header(payload_length, file_name or b"", compression, encryption).to_bytes()


def _read_exact(stream: BinaryIO, count: int, what: str) -> bytes:
    data = stream.read(count)
    if data is None or len(data) < count:
        got = 0 if data is None else len(data)
        raise IncompleteHeader(f"Header truncated in {what}: wanted {count} bytes, got {got}")
    return bytes(data)


def decode_header(stream: BinaryIO) -> Header:
    """Parse a header from `stream`, consuming exactly the header bytes.

    The fixed part is read first; it carries the length of the variable
    file name tail, which is read second.
    """
    stamp = _read_exact(stream, len(DATA_STAMP), "stamp")
    if stamp != DATA_STAMP:
        raise InvalidContainerHeader()

    version = _read_exact(stream, len(HEADER_VERSION), "version")
    if version != HEADER_VERSION:
        raise UnsupportedHeaderVersion(
            f"Header version {version[0]} is not supported (expected {HEADER_VERSION[0]})"
        )

    fixed = _read_exact(stream, FIXED_HEADER_LENGTH, "fixed block")
    payload_length = fixed[0] | (fixed[1] << 8) | (fixed[2] << 16) | (fixed[3] << 24)
    file_name_length = fixed[4]
    compression = fixed[5] == 1
    encryption = fixed[6] == 1

    file_name = b""
    if file_name_length > 0:
        file_name = _read_exact(stream, file_name_length, "file name")

    return Header(payload_length, file_name, compression, encryption)


def fixed_header_size() -> int:
    return len(DATA_STAMP) + len(HEADER_VERSION) + FIXED_HEADER_LENGTH


def header_size(header: Header) -> int:
    return fixed_header_size() + header.file_name_length


def max_header_size() -> int:
    return fixed_header_size() + ASSUMED_MAX_FILE_NAME_LENGTH

from __future__ import annotations

from typing import Optional


class StegoError(Exception):
    """Base class for all stegano-dct errors."""

    code = "STEGO_ERROR"

    def __init__(self, message: str = "", code: Optional[str] = None):
        self.message = message or self.__doc__ or self.code
        if code:
            self.code = code
        super().__init__(self.message)


class InvalidContainerHeader(StegoError):
    """Data stamp missing: the image does not carry embedded data."""

    code = "INVALID_STEGO_HEADER"


class UnsupportedHeaderVersion(StegoError):
    """Embedded data uses a header version this release cannot read."""

    code = "INVALID_HEADER_VERSION"


class IncompleteHeader(StegoError):
    """Cover ran out of data while reading the header."""

    code = "INCOMPLETE_HEADER"


class FileNameTooLong(StegoError):
    code = "FILE_NAME_TOO_LONG"

    def __init__(self, length: int, limit: int = 255):
        self.length = length
        self.limit = limit
        super().__init__(f"File name is {length} bytes, at most {limit} can be embedded")


class InsufficientCapacity(StegoError):
    """Cover image too small for header and payload."""

    code = "IMAGE_SIZE_INSUFFICIENT"

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(f"Need {required} bits, cover holds {available} bits")


class ImageDataReadError(StegoError):
    """Fewer payload bytes could be read than the header announced."""

    code = "IMAGE_DATA_READ"


class IOFailure(StegoError):
    code = "IO_FAILURE"


class UnsupportedImageFormat(StegoError):
    code = "UNSUPPORTED_IMAGE_FORMAT"


class PayloadOverflow(StegoError):
    """More payload bytes written than declared in the header."""

    code = "PAYLOAD_OVERFLOW"


class WriterClosed(StegoError):
    """Write attempted on a closed writer."""

    code = "WRITER_CLOSED"


class PasswordRequired(StegoError):
    """Encryption requested but no password given."""

    code = "PASSWORD_REQUIRED"


class DecryptionFailed(StegoError):
    code = "DECRYPTION_FAILED"


class DecompressionFailed(StegoError):
    code = "DECOMPRESSION_FAILED"

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Union

import numpy as np

from .capacity import check_capacity, required_bits
from .config import OperationContext
from .errors import InsufficientCapacity, PayloadOverflow, WriterClosed
from .header import Header, decode_header
from .image_utils import CoverImage, dct2, idct2
from .traversal import DEFAULT_TRAVERSAL, EMBED_COEFFICIENT, BlockTraversal, Position


logger = logging.getLogger(__name__)

# Half a step must exceed the worst rounding error a lossless save puts on the
# embedding coefficient (about 3.4 for (3, 2) in an orthonormal 8x8 DCT).
QUANT_STEP = 10.0
# Keeps pixels in range after the coefficient moves by up to one step.
CLIP_MARGIN = 3


def bytes_to_bits(data: bytes) -> List[int]:
    bits: List[int] = []
    for b in data:
        for i in range(8)[::-1]:
            bits.append((b >> i) & 1)
    return bits


def bits_to_bytes(bits: List[int]) -> bytes:
    if len(bits) % 8 != 0:
        raise ValueError("Bit length not divisible by 8")
    out = bytearray()
    for i in range(0, len(bits), 8):
        val = 0
        for j in range(8):
            val = (val << 1) | (bits[i + j] & 1)
        out.append(val)
    return bytes(out)


def quantize_to_parity(value: float, bit: int, delta: float = QUANT_STEP) -> float:
    """Nearest multiple of `delta` whose index has parity `bit` (QIM)."""
    q = value / delta
    k = int(np.floor(q + 0.5))
    if (k & 1) != (bit & 1):
        k = k + 1 if q >= k else k - 1
    return k * delta


def parity_of(value: float, delta: float = QUANT_STEP) -> int:
    return int(np.floor(value / delta + 0.5)) & 1


def embed_bit_in_block(block: np.ndarray, bit: int, coefficient=EMBED_COEFFICIENT, delta: float = QUANT_STEP) -> np.ndarray:
    """Return the block with `bit` carried by one quantized DCT coefficient.

    The result is already rounded to integer pixel values.
    """
    clamped = np.clip(block, CLIP_MARGIN, 255 - CLIP_MARGIN)
    coeffs = dct2(clamped)
    u, v = coefficient
    coeffs[u, v] = quantize_to_parity(float(coeffs[u, v]), bit, delta)
    return np.clip(np.rint(idct2(coeffs)), 0, 255)


def extract_bit_from_block(block: np.ndarray, coefficient=EMBED_COEFFICIENT, delta: float = QUANT_STEP) -> int:
    coeffs = dct2(block)
    u, v = coefficient
    return parity_of(float(coeffs[u, v]), delta)


class _CoefficientStream:
    """Byte stream read from the coefficients of a plane, in traversal order."""

    def __init__(self, plane: np.ndarray, positions: Iterator[Position], traversal: BlockTraversal, delta: float):
        self._plane = plane
        self._positions = positions
        self._traversal = traversal
        self._delta = delta

    def _next_bit(self) -> Optional[int]:
        try:
            r, c = next(self._positions)
        except StopIteration:
            return None
        n = self._traversal.block_size
        return extract_bit_from_block(self._plane[r:r + n, c:c + n], self._traversal.coefficient, self._delta)

    def read(self, count: int) -> bytes:
        """Read up to `count` whole bytes; a trailing partial byte is dropped."""
        bits: List[int] = []
        while len(bits) < count * 8:
            bit = self._next_bit()
            if bit is None:
                break
            bits.append(bit)
        return bits_to_bytes(bits[:len(bits) - len(bits) % 8])


class DctLsbWriter:
    """Writes a header and then payload bytes into a cover, one bit per block.

    The header is written on construction. Pixels of the cover itself are
    only updated by `close`, so a failed embed leaves the cover untouched.
    """

    def __init__(
        self,
        cover: CoverImage,
        payload_length: int,
        file_name: Union[str, bytes, None] = None,
        context: Optional[OperationContext] = None,
        traversal: BlockTraversal = DEFAULT_TRAVERSAL,
        delta: float = QUANT_STEP,
    ):
        context = context or OperationContext()
        if isinstance(file_name, bytes):
            self.header = Header(payload_length, file_name, context.use_compression, context.use_encryption)
        else:
            self.header = Header.for_file(payload_length, file_name, context.use_compression, context.use_encryption)

        check_capacity(cover, required_bits(payload_length, self.header), traversal)

        self._cover = cover
        self._traversal = traversal
        self._delta = delta
        self._plane = cover.plane()
        self._positions = traversal.positions(cover.height, cover.width)
        self._bits_written = 0
        self._payload_written = 0
        self._closed = False

        self._write_raw(self.header.to_bytes())
        logger.debug(f"Header written: {self.header.size} bytes, payload of {payload_length} bytes pending")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def bits_written(self) -> int:
        return self._bits_written

    def _write_raw(self, data: bytes) -> None:
        n = self._traversal.block_size
        for bit in bytes_to_bits(data):
            try:
                r, c = next(self._positions)
            except StopIteration:
                raise InsufficientCapacity(self._bits_written + 1, self._bits_written) from None
            block = self._plane[r:r + n, c:c + n]
            self._plane[r:r + n, c:c + n] = embed_bit_in_block(block, bit, self._traversal.coefficient, self._delta)
            self._bits_written += 1

    def write(self, data: bytes) -> int:
        if self._closed:
            raise WriterClosed()
        if self._payload_written + len(data) > self.header.payload_length:
            raise PayloadOverflow(
                f"Header declares {self.header.payload_length} bytes, "
                f"attempted to write {self._payload_written + len(data)}"
            )
        self._write_raw(data)
        self._payload_written += len(data)
        return len(data)

    def close(self) -> CoverImage:
        if self._closed:
            return self._cover
        if self._payload_written < self.header.payload_length:
            logger.warning(
                f"Writer closed after {self._payload_written} of {self.header.payload_length} payload bytes"
            )
        self._cover.store_plane(self._plane)
        self._closed = True
        logger.debug(f"Writer closed: {self._bits_written} bits embedded")
        return self._cover

    def get_image(self) -> CoverImage:
        return self._cover

    def __enter__(self) -> "DctLsbWriter":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()


class DctLsbReader:
    """Reads the header and then payload bytes back from a stego cover.

    Blocks are visited in the same order the writer used. The header is
    parsed on construction, fixed part first and file name second.
    """

    def __init__(
        self,
        cover: CoverImage,
        context: Optional[OperationContext] = None,
        traversal: BlockTraversal = DEFAULT_TRAVERSAL,
        delta: float = QUANT_STEP,
    ):
        self._stream = _CoefficientStream(
            cover.plane(),
            traversal.positions(cover.height, cover.width),
            traversal,
            delta,
        )
        self._header = decode_header(self._stream)
        self.context = (context or OperationContext()).with_flags(self._header.compression, self._header.encryption)
        self._remaining = self._header.payload_length
        logger.debug(f"Header read: payload {self._header.payload_length} bytes, name {self._header.name!r}")

    @property
    def header(self) -> Header:
        return self._header

    def get_header(self) -> Header:
        return self._header

    @property
    def remaining(self) -> int:
        return self._remaining

    def read(self, max_length: int = -1) -> bytes:
        """Read up to `max_length` payload bytes (all remaining if negative).

        Returns fewer bytes only when the cover runs out of blocks.
        """
        count = self._remaining if max_length < 0 else min(max_length, self._remaining)
        data = self._stream.read(count)
        self._remaining -= len(data)
        return data

from __future__ import annotations

from typing import Optional

from .errors import InsufficientCapacity
from .header import Header, header_size, max_header_size
from .image_utils import CoverImage, synthesize_random
from .traversal import DEFAULT_TRAVERSAL, BlockTraversal


BITS_PER_COEFFICIENT = 1


def required_bits(payload_length: int, header: Optional[Header] = None) -> int:
    """Bits needed for header plus payload.

    Without a header the largest possible one is assumed.
    """
    size = header_size(header) if header is not None else max_header_size()
    return (size + payload_length) * 8 * BITS_PER_COEFFICIENT


def available_bits(cover: CoverImage, traversal: BlockTraversal = DEFAULT_TRAVERSAL) -> int:
    return traversal.capacity(cover.height, cover.width) * BITS_PER_COEFFICIENT


def fits(cover: CoverImage, required: int, traversal: BlockTraversal = DEFAULT_TRAVERSAL) -> bool:
    return available_bits(cover, traversal) >= required


def check_capacity(cover: CoverImage, required: int, traversal: BlockTraversal = DEFAULT_TRAVERSAL) -> None:
    available = available_bits(cover, traversal)
    if available < required:
        raise InsufficientCapacity(required, available)


def payload_capacity(cover: CoverImage, file_name: bytes = b"", traversal: BlockTraversal = DEFAULT_TRAVERSAL) -> int:
    """Largest payload in bytes the cover can take with the given file name."""
    overhead = header_size(Header(0, file_name))
    return max(0, available_bits(cover, traversal) // 8 - overhead)


def synthesize_cover(required: int, traversal: BlockTraversal = DEFAULT_TRAVERSAL, seed: Optional[int] = None) -> CoverImage:
    coefficients = -(-required // BITS_PER_COEFFICIENT)
    return synthesize_random(coefficients, block_size=traversal.block_size, seed=seed)

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from .image_utils import BLOCK_SIZE, mid_frequency_mask


Position = Tuple[int, int]  # (row, col) pixel offset of a block's top-left corner

EMBED_COEFFICIENT = (3, 2)


@dataclass(frozen=True)
class BlockTraversal:
    """Order in which blocks carry bits, shared by writer and reader.

    Only full blocks are used, in raster order; a partial block at the right or
    bottom edge is skipped. The order depends on nothing but the image size and
    block size, so a reader replaying it over a stego image visits the same
    blocks the writer did.
    """

    block_size: int = BLOCK_SIZE
    coefficient: Tuple[int, int] = EMBED_COEFFICIENT

    def __post_init__(self):
        u, v = self.coefficient
        if not (0 <= u < self.block_size and 0 <= v < self.block_size):
            raise ValueError(f"Coefficient {self.coefficient} outside a {self.block_size}x{self.block_size} block")
        if not mid_frequency_mask(self.block_size)[u, v]:
            raise ValueError(f"Coefficient {self.coefficient} is not in the mid-frequency band")

    def grid(self, height: int, width: int) -> Tuple[int, int]:
        return height // self.block_size, width // self.block_size

    def capacity(self, height: int, width: int) -> int:
        rows, cols = self.grid(height, width)
        return rows * cols

    def positions(self, height: int, width: int) -> Iterator[Position]:
        rows, cols = self.grid(height, width)
        for bi in range(rows):
            for bj in range(cols):
                yield bi * self.block_size, bj * self.block_size


DEFAULT_TRAVERSAL = BlockTraversal()

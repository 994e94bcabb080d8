from __future__ import annotations

import io
import logging
import math
import os
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import IOFailure, UnsupportedImageFormat


logger = logging.getLogger(__name__)

BLOCK_SIZE = 8
# Pillow writers that store 8-bit RGB without quantizing or compressing lossily
LOSSLESS_FORMATS = {"PNG", "BMP", "TIFF", "PPM", "TGA"}
DEFAULT_FORMAT = "PNG"


@dataclass
class CoverImage:
    """RGB pixels of a cover or stego image; one channel carries the data."""

    pixels: np.ndarray
    channel: int = 0

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 3:
            raise ValueError(f"Expected an HxWx3 array, got shape {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            self.pixels = np.clip(self.pixels, 0, 255).astype(np.uint8)

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    def plane(self) -> np.ndarray:
        """Copy of the embedding channel as float32."""
        return self.pixels[:, :, self.channel].astype(np.float32)

    def store_plane(self, plane: np.ndarray) -> None:
        self.pixels[:, :, self.channel] = np.clip(np.rint(plane), 0, 255).astype(np.uint8)


def decode_cover(data: bytes, name: Optional[str] = None) -> CoverImage:
    """Decode image file bytes into a cover. Anything Pillow reads is accepted."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
        arr = np.array(img.convert("RGB"), dtype=np.uint8)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise IOFailure(f"Cannot read image {name or '<bytes>'}: {e}") from e
    logger.debug(f"Decoded {name or '<bytes>'}: {img.format} {arr.shape[1]}x{arr.shape[0]}")
    return CoverImage(arr)


def image_format_for(name: Optional[str]) -> str:
    if not name:
        return DEFAULT_FORMAT
    ext = os.path.splitext(name)[1].lower()
    if not ext:
        return DEFAULT_FORMAT
    fmt = Image.registered_extensions().get(ext)
    if fmt not in LOSSLESS_FORMATS:
        raise UnsupportedImageFormat(f"{ext} cannot hold embedded data exactly; use .png, .bmp, .tiff, .ppm or .tga")
    return fmt


def encode_cover(cover: CoverImage, name: Optional[str] = None) -> bytes:
    """Encode a cover losslessly, picking the format from the file name."""
    fmt = image_format_for(name)
    img = Image.fromarray(cover.pixels)
    buf = io.BytesIO()
    try:
        img.save(buf, format=fmt)
    except (OSError, KeyError, ValueError) as e:
        raise IOFailure(f"Cannot write image as {fmt}: {e}") from e
    return buf.getvalue()


def synthesize_random(bit_capacity: int, block_size: int = BLOCK_SIZE, seed: Optional[int] = None) -> CoverImage:
    """Random-noise cover with at least `bit_capacity` full blocks, laid out near-square."""
    blocks = max(1, int(bit_capacity))
    cols = math.ceil(math.sqrt(blocks))
    rows = math.ceil(blocks / cols)
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(rows * block_size, cols * block_size, 3), dtype=np.uint8)
    logger.debug(f"Synthesized {cols * block_size}x{rows * block_size} cover for {bit_capacity} bits")
    return CoverImage(pixels)


def dct2(block: np.ndarray) -> np.ndarray:
    return cv2.dct(block.astype(np.float32))


def idct2(coeffs: np.ndarray) -> np.ndarray:
    return cv2.idct(coeffs.astype(np.float32))


def mid_frequency_mask(block_size: int = BLOCK_SIZE) -> np.ndarray:
    """Return a boolean mask selecting mid-frequency coefficients in an NxN DCT block.

    Excludes DC (0,0) and the highest frequencies. Uses simple band selection by (i+j).
    """
    mask = np.zeros((block_size, block_size), dtype=bool)
    for i in range(block_size):
        for j in range(block_size):
            if i == 0 and j == 0:
                continue
            s = i + j
            if 3 <= s <= 6:
                mask[i, j] = True
    return mask

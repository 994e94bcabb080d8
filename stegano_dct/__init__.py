"""Stegano-DCT package: hides files in quantized DCT coefficients of images.

Modules:
- header: container header encoding/decoding
- capacity: capacity checks and random cover synthesis
- traversal: block order shared by writer and reader
- embedder: bit-level writer and reader over DCT coefficients
- image_utils: cover images, DCT/IDCT, masks
- crypto: zlib compression and AES-256-GCM password-based encryption
- plugin: embed/extract orchestration
- cli: command-line interface (embed/extract/capacity)
"""

from .config import OperationContext
from .header import Header
from .plugin import DctLsbPlugin

__all__ = [
    "DctLsbPlugin",
    "Header",
    "OperationContext",
    "header",
    "capacity",
    "traversal",
    "embedder",
    "image_utils",
    "crypto",
]

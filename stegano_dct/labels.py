from __future__ import annotations

from types import MappingProxyType
from typing import Mapping


class Labels:
    """Read-only lookup of user-facing strings, built once and passed around."""

    def __init__(self, table: Mapping[str, str]):
        self._table = MappingProxyType(dict(table))

    def get(self, key: str) -> str:
        return self._table.get(key, key)


DCT_LSB_LABELS = Labels(
    {
        "plugin.description": (
            "Hides data in the least-significant bit of a quantized mid-frequency "
            "DCT coefficient of each 8x8 image block"
        ),
        "plugin.usage": (
            "Embed:   stegano-dct embed --payload FILE [--cover IMAGE] --out STEGO.png "
            "[--compress] [--encrypt --password PW]\n"
            "Extract: stegano-dct extract --in STEGO.png [--out FILE] [--password PW]\n"
            "Capacity: stegano-dct capacity --cover IMAGE\n"
            "Stego images must be saved in a lossless format (PNG, BMP, TIFF, PPM, TGA)."
        ),
    }
)

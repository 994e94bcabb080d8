"""DCT LSB plugin: embeds a file into a cover image and extracts it again."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .capacity import required_bits, synthesize_cover
from .config import OperationContext
from .crypto import transform_in, transform_out
from .embedder import DctLsbReader, DctLsbWriter
from .errors import ImageDataReadError
from .header import Header
from .image_utils import decode_cover, encode_cover, image_format_for
from .labels import DCT_LSB_LABELS, Labels
from .traversal import DEFAULT_TRAVERSAL, BlockTraversal


logger = logging.getLogger(__name__)


class DctLsbPlugin:
    name = "DctLSB"

    def __init__(self, labels: Labels = DCT_LSB_LABELS, traversal: BlockTraversal = DEFAULT_TRAVERSAL):
        self.labels = labels
        self.traversal = traversal

    @property
    def description(self) -> str:
        return self.labels.get("plugin.description")

    @property
    def usage(self) -> str:
        return self.labels.get("plugin.usage")

    def embed(
        self,
        payload: bytes,
        payload_file_name: Optional[str] = None,
        cover: Optional[bytes] = None,
        cover_file_name: Optional[str] = None,
        stego_file_name: Optional[str] = None,
        context: Optional[OperationContext] = None,
    ) -> bytes:
        """Hide `payload` in `cover` and return the encoded stego image.

        Without a cover a random one just large enough is generated.
        """
        context = context or OperationContext()
        image_format_for(stego_file_name)
        data = transform_out(payload, context)

        if cover is None:
            image = synthesize_cover(required_bits(len(data)), self.traversal)
        else:
            image = decode_cover(cover, cover_file_name)

        logger.info(
            f"Embedding {len(data)} bytes into {image.width}x{image.height} image "
            f"(compression={context.use_compression}, encryption={context.use_encryption})"
        )
        writer = DctLsbWriter(image, len(data), payload_file_name, context, self.traversal)
        writer.write(data)
        stego = writer.close()
        return encode_cover(stego, stego_file_name)

    def _open(self, stego: bytes, stego_file_name: Optional[str], context: Optional[OperationContext]) -> DctLsbReader:
        return DctLsbReader(decode_cover(stego, stego_file_name), context, self.traversal)

    def read_header(self, stego: bytes, stego_file_name: Optional[str] = None) -> Header:
        return self._open(stego, stego_file_name, None).header

    def extract_file_name(self, stego: bytes, stego_file_name: Optional[str] = None, context: Optional[OperationContext] = None) -> str:
        return self._open(stego, stego_file_name, context).header.name

    def extract(self, stego: bytes, stego_file_name: Optional[str] = None, context: Optional[OperationContext] = None) -> bytes:
        return self.extract_with_header(stego, stego_file_name, context)[1]

    def extract_with_header(
        self, stego: bytes, stego_file_name: Optional[str] = None, context: Optional[OperationContext] = None
    ) -> Tuple[Header, bytes]:
        """Decode the image once and return its header together with the payload."""
        reader = self._open(stego, stego_file_name, context)
        expected = reader.header.payload_length
        data = reader.read(expected)
        if len(data) != expected:
            raise ImageDataReadError(f"Read {len(data)} of {expected} payload bytes")
        logger.info(f"Extracted {expected} bytes ({reader.header.name or 'unnamed'})")
        return reader.header, transform_in(data, reader.context)

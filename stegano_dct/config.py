from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class OperationContext:
    """Options for a single embed/extract call.

    Built fresh for every operation. Extraction derives its own copy from the
    decoded header flags with `with_flags` instead of mutating anything shared.
    """

    use_compression: bool = False
    use_encryption: bool = False
    password: Optional[str] = None
    compression_level: int = 6

    def with_flags(self, compression: bool, encryption: bool) -> "OperationContext":
        return replace(self, use_compression=compression, use_encryption=encryption)

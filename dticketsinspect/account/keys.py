"""32-byte account identifiers and their base58 text form."""
from __future__ import annotations

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from dticketsinspect.config import PUBKEY_SIZE

__all__ = ["Pubkey", "is_valid_pubkey", "pubkey_from_bytes"]


def pubkey_from_bytes(raw: bytes) -> Pubkey:
    if len(raw) != PUBKEY_SIZE:
        raise ValueError(f"Pubkey must be {PUBKEY_SIZE} bytes, got {len(raw)}")
    return Pubkey.from_bytes(raw)


def is_valid_pubkey(text: str) -> bool:
    """Check that text is base58 decoding to exactly 32 bytes."""
    try:
        Pubkey.from_string(text)
    except ValueError:
        return False
    return True

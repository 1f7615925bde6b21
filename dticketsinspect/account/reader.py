"""Bounds-checked fixed-width readers over an immutable account buffer.

Every reader takes the buffer and the current offset and returns
``(value, new_offset)``. A read that needs more bytes than remain raises
BufferUnderrun before anything is consumed.
"""
from __future__ import annotations

import struct
from typing import Optional

from dticketsinspect.account.errors import BufferUnderrun
from dticketsinspect.account.keys import Pubkey, pubkey_from_bytes
from dticketsinspect.account.records import SUSPICIOUS_TAG, Diagnostic
from dticketsinspect.config import PUBKEY_SIZE

# Struct formats (little-endian)
_U8 = struct.Struct("<B")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_I64 = struct.Struct("<q")


def _require(buf: bytes, offset: int, n: int) -> None:
    available = len(buf) - offset
    if n > available:
        raise BufferUnderrun(offset, n, max(available, 0))


def read_fixed(buf: bytes, offset: int, n: int) -> tuple[bytes, int]:
    """Return the next n raw bytes."""
    if n < 0:
        raise ValueError(f"Byte count must be >= 0, got {n}")
    _require(buf, offset, n)
    return bytes(buf[offset:offset + n]), offset + n


def skip(buf: bytes, offset: int, n: int) -> int:
    """Advance past n bytes without capturing them. Returns the new offset."""
    if n < 0:
        raise ValueError(f"Byte count must be >= 0, got {n}")
    _require(buf, offset, n)
    return offset + n


def _read_struct(fmt: struct.Struct, buf: bytes, offset: int) -> tuple[int, int]:
    _require(buf, offset, fmt.size)
    return fmt.unpack_from(buf, offset)[0], offset + fmt.size


def read_u8(buf: bytes, offset: int) -> tuple[int, int]:
    return _read_struct(_U8, buf, offset)


def read_u32(buf: bytes, offset: int) -> tuple[int, int]:
    return _read_struct(_U32, buf, offset)


def read_u64(buf: bytes, offset: int) -> tuple[int, int]:
    return _read_struct(_U64, buf, offset)


def read_i64(buf: bytes, offset: int) -> tuple[int, int]:
    return _read_struct(_I64, buf, offset)


def read_bool(buf: bytes, offset: int,
              diagnostics: Optional[list[Diagnostic]] = None) -> tuple[bool, int]:
    """Read a one-byte flag.

    Bytes other than 0/1 are read as true and reported as a SuspiciousTag
    diagnostic instead of failing.
    """
    value, new_offset = read_u8(buf, offset)
    if value > 1 and diagnostics is not None:
        diagnostics.append(Diagnostic(
            SUSPICIOUS_TAG, offset,
            f"boolean byte is {value}, expected 0 or 1 (treated as true)",
        ))
    return value != 0, new_offset


def read_pubkey(buf: bytes, offset: int) -> tuple[Pubkey, int]:
    raw, new_offset = read_fixed(buf, offset, PUBKEY_SIZE)
    return pubkey_from_bytes(raw), new_offset

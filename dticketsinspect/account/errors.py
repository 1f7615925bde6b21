"""Decode errors raised by the account readers.

Every error records two positions:
  offset: where the failing read started
  cursor: how far the cursor had advanced when the failure was detected
          (e.g. a rejected length prefix has already been consumed)
"""
from __future__ import annotations

from typing import Optional


class DecodeError(ValueError):
    """Base class for fatal decode failures."""

    kind = "DecodeError"

    def __init__(self, message: str, offset: int, cursor: Optional[int] = None):
        super().__init__(message)
        self.offset = offset
        self.cursor = offset if cursor is None else cursor
        # Set when the failure happened inside a vector element
        self.vector_offset: Optional[int] = None

    def __str__(self) -> str:
        msg = super().__str__()
        if self.vector_offset is not None:
            msg += f" (in vector starting at offset {self.vector_offset})"
        return msg


class BufferUnderrun(DecodeError):
    kind = "BufferUnderrun"

    def __init__(self, offset: int, needed: int, available: int):
        super().__init__(
            f"Buffer underrun at offset {offset}: need {needed} bytes, {available} available",
            offset,
        )
        self.needed = needed
        self.available = available


class InvalidLength(DecodeError):
    """String length prefix outside the sanity bound. Payload is never read."""
    kind = "InvalidLength"

    def __init__(self, offset: int, declared: int, bound: int):
        super().__init__(
            f"Invalid string length at offset {offset}: {declared} (max {bound})",
            offset, cursor=offset + 4,
        )
        self.declared = declared
        self.bound = bound


class TextDecodeError(DecodeError):
    kind = "TextDecodeError"

    def __init__(self, offset: int, length: int):
        super().__init__(
            f"Malformed UTF-8 in {length}-byte string at offset {offset}",
            offset, cursor=offset + 4,
        )
        self.length = length


class InvalidOptionTag(DecodeError):
    kind = "InvalidOptionTag"

    def __init__(self, offset: int, tag: int):
        super().__init__(
            f"Invalid option tag at offset {offset}: {tag} (expected 0 or 1)",
            offset, cursor=offset + 1,
        )
        self.tag = tag


class ImplausibleCount(DecodeError):
    """Vector count outside the plausibility bound. No element is read."""
    kind = "ImplausibleCount"

    def __init__(self, offset: int, declared: int, bound: int):
        super().__init__(
            f"Implausible vector count at offset {offset}: {declared} (max {bound})",
            offset, cursor=offset + 4,
        )
        self.declared = declared
        self.bound = bound


class EventDecodeFailed(DecodeError):
    """Raised by decode_event_account_or_raise; carries the failed DecodeResult."""
    kind = "EventDecodeFailed"

    def __init__(self, result):
        error = result.error
        super().__init__(
            f"Failed to decode field '{result.failed_field}': {error}",
            error.offset, cursor=error.cursor,
        )
        self.result = result

"""Variable-length field readers: strings, options and enum tags."""
from __future__ import annotations

from typing import Callable, Optional, TypeVar

from dticketsinspect.account.enums import lookup_enum
from dticketsinspect.account.errors import (
    BufferUnderrun,
    InvalidLength,
    InvalidOptionTag,
    TextDecodeError,
)
from dticketsinspect.account.reader import read_u8, read_u32
from dticketsinspect.account.records import SUSPICIOUS_TAG, Diagnostic
from dticketsinspect.config import DEFAULT_MAX_STRING_LEN

T = TypeVar("T")
Reader = Callable[[bytes, int], tuple[T, int]]


def read_string(buf: bytes, offset: int,
                max_len: int = DEFAULT_MAX_STRING_LEN) -> tuple[str, int]:
    """Read a u32 length-prefixed UTF-8 string.

    The length is checked against max_len before the payload is touched, so an
    implausible prefix fails with InvalidLength even if the payload would also
    run past the end of the buffer.
    """
    length, pos = read_u32(buf, offset)
    if length > max_len:
        raise InvalidLength(offset, length, max_len)

    available = len(buf) - pos
    if length > available:
        raise BufferUnderrun(pos, length, available)

    try:
        text = bytes(buf[pos:pos + length]).decode("utf-8")
    except UnicodeDecodeError:
        raise TextDecodeError(offset, length) from None
    return text, pos + length


def read_option(buf: bytes, offset: int, inner: Reader) -> tuple[Optional[T], int]:
    """Read an Option<T>: tag 0 is None, tag 1 delegates to inner.

    Any other tag is fatal, since it decides whether the inner bytes exist.
    """
    tag, pos = read_u8(buf, offset)
    if tag == 0:
        return None, pos
    if tag != 1:
        raise InvalidOptionTag(offset, tag)
    return inner(buf, pos)


def read_enum_tag(buf: bytes, offset: int,
                  variants: Optional[dict[int, str]] = None,
                  diagnostics: Optional[list[Diagnostic]] = None) -> tuple[int, int]:
    """Read a one-byte enum discriminant.

    With a variant table, unknown tags are reported as SuspiciousTag
    diagnostics; the tag is still returned.
    """
    tag, pos = read_u8(buf, offset)
    if variants is not None and tag not in variants and diagnostics is not None:
        diagnostics.append(Diagnostic(
            SUSPICIOUS_TAG, offset,
            f"enum tag {lookup_enum(variants, tag)} is not one of "
            f"{', '.join(variants.values())}",
        ))
    return tag, pos

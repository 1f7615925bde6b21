"""Vec<String> reader and ticket-area mapping post-processing."""
from __future__ import annotations

from dticketsinspect.account.errors import DecodeError, ImplausibleCount
from dticketsinspect.account.fields import read_string
from dticketsinspect.account.reader import read_u32
from dticketsinspect.account.records import TicketAreaMapping
from dticketsinspect.config import (
    DEFAULT_MAX_STRING_LEN,
    DEFAULT_MAX_VECTOR_LEN,
    MAPPING_SEPARATOR,
)


def read_string_vec(buf: bytes, offset: int,
                    max_count: int = DEFAULT_MAX_VECTOR_LEN,
                    max_len: int = DEFAULT_MAX_STRING_LEN) -> tuple[list[str], int]:
    """Read a u32 count followed by that many length-prefixed strings.

    A count above max_count fails right after the 4 count bytes, before any
    element is read. An element failure aborts the whole vector.
    """
    count, pos = read_u32(buf, offset)
    if count > max_count:
        raise ImplausibleCount(offset, count, max_count)

    items = []
    for _ in range(count):
        try:
            text, pos = read_string(buf, pos, max_len)
        except DecodeError as e:
            e.vector_offset = offset
            raise
        items.append(text)
    return items, pos


def split_mapping(text: str, separator: str = MAPPING_SEPARATOR) -> TicketAreaMapping:
    """Split "<type>-<area>" on the first separator.

    Everything after the first separator is the area, so "VIP-A-1" gives
    ("VIP", "A-1"). Text without a separator is kept unsplit.
    """
    ticket_type, sep, area = text.partition(separator)
    if not sep:
        return TicketAreaMapping(raw=text)
    return TicketAreaMapping(raw=text, ticket_type=ticket_type, area=area)


def read_ticket_area_mappings(buf: bytes, offset: int,
                              max_count: int = DEFAULT_MAX_VECTOR_LEN,
                              max_len: int = DEFAULT_MAX_STRING_LEN,
                              ) -> tuple[list[TicketAreaMapping], int]:
    items, pos = read_string_vec(buf, offset, max_count, max_len)
    return [split_mapping(item) for item in items], pos

"""Decode d-tickets EventAccount data without the program IDL.

The account layout is a fixed, ordered field sequence. Each field is read
with one of the account readers and a single cursor is threaded through all
of them, starting at offset 0. The first failing field ends the run: its
error is returned together with the fields captured so far, and nothing
after it is interpreted.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from dticketsinspect.account.enums import EVENT_STATUS, PRICING_STRATEGY
from dticketsinspect.account.errors import DecodeError, EventDecodeFailed
from dticketsinspect.account.fields import read_enum_tag, read_option, read_string
from dticketsinspect.account.reader import read_i64, read_pubkey, read_u8, read_u32, skip
from dticketsinspect.account.records import DecodeResult, Diagnostic, EventRecord
from dticketsinspect.account.vector import read_ticket_area_mappings
from dticketsinspect.config import (
    COUNTER_SIZE,
    DEFAULT_LIMITS,
    DISCRIMINATOR_SIZE,
    TIMESTAMP_SIZE,
    DecoderLimits,
)

# (buf, offset, limits, diagnostics) -> (value, new_offset)
FieldReader = Callable[[bytes, int, DecoderLimits, list[Diagnostic]], tuple[Any, int]]


@dataclass(frozen=True)
class FieldStep:
    name: str
    read: FieldReader
    surfaced: bool = True


def _skip(n: int) -> FieldReader:
    def read(buf, offset, limits, diagnostics):
        return None, skip(buf, offset, n)
    return read


def _string(buf, offset, limits, diagnostics):
    return read_string(buf, offset, limits.max_string_len)


def _optional_string(buf, offset, limits, diagnostics):
    return read_option(buf, offset, lambda b, o: read_string(b, o, limits.max_string_len))


def _enum(variants: dict[int, str]) -> FieldReader:
    def read(buf, offset, limits, diagnostics):
        return read_enum_tag(buf, offset, variants, diagnostics)
    return read


def _pubkey(buf, offset, limits, diagnostics):
    return read_pubkey(buf, offset)


def _u8(buf, offset, limits, diagnostics):
    return read_u8(buf, offset)


def _u32(buf, offset, limits, diagnostics):
    return read_u32(buf, offset)


def _i64(buf, offset, limits, diagnostics):
    return read_i64(buf, offset)


def _mappings(buf, offset, limits, diagnostics):
    return read_ticket_area_mappings(buf, offset, limits.max_vector_len, limits.max_string_len)


# EventAccount layout, in on-chain order. Trailing bump/created_at/updated_at
# are not read.
EVENT_ACCOUNT_FIELDS: tuple[FieldStep, ...] = (
    FieldStep("discriminator", _skip(DISCRIMINATOR_SIZE), surfaced=False),
    FieldStep("organizer", _pubkey),
    FieldStep("event_name", _string),
    FieldStep("event_description_hash", _string, surfaced=False),
    FieldStep("event_poster_image_hash", _string, surfaced=False),
    FieldStep("event_start_time", _skip(TIMESTAMP_SIZE), surfaced=False),
    FieldStep("event_end_time", _skip(TIMESTAMP_SIZE), surfaced=False),
    FieldStep("ticket_sale_start_time", _skip(TIMESTAMP_SIZE), surfaced=False),
    FieldStep("ticket_sale_end_time", _skip(TIMESTAMP_SIZE), surfaced=False),
    FieldStep("venue_account", _pubkey),
    FieldStep("seat_map_hash", _optional_string),
    FieldStep("event_category", _string),
    FieldStep("performer_details_hash", _string),
    FieldStep("contact_info_hash", _string),
    FieldStep("event_status", _enum(EVENT_STATUS), surfaced=False),
    FieldStep("refund_policy_hash", _string),
    FieldStep("pricing_strategy_type", _enum(PRICING_STRATEGY), surfaced=False),
    FieldStep("total_tickets_minted", _u32),
    FieldStep("total_tickets_sold", _u32),
    FieldStep("total_tickets_refunded", _skip(COUNTER_SIZE), surfaced=False),
    FieldStep("total_tickets_resale_available", _skip(COUNTER_SIZE), surfaced=False),
    FieldStep("total_revenue", _i64),
    FieldStep("ticket_types_count", _u8),
    FieldStep("ticket_area_mappings", _mappings),
)


def decode_event_account(data: bytes, limits: DecoderLimits = DEFAULT_LIMITS) -> DecodeResult:
    """Decode raw EventAccount bytes into a DecodeResult."""
    buf = bytes(data)
    offset = 0
    fields: dict[str, Any] = {}
    diagnostics: list[Diagnostic] = []

    for step in EVENT_ACCOUNT_FIELDS:
        try:
            value, offset = step.read(buf, offset, limits, diagnostics)
        except DecodeError as e:
            return DecodeResult(
                record=None,
                bytes_consumed=e.cursor,
                diagnostics=diagnostics,
                error=e,
                failed_field=step.name,
                partial=fields,
            )
        if step.surfaced:
            fields[step.name] = value

    return DecodeResult(
        record=EventRecord(**fields),
        bytes_consumed=offset,
        diagnostics=diagnostics,
    )


def decode_event_account_or_raise(data: bytes,
                                  limits: DecoderLimits = DEFAULT_LIMITS) -> EventRecord:
    """Like decode_event_account, but raise EventDecodeFailed on failure."""
    result = decode_event_account(data, limits)
    if not result.success:
        raise EventDecodeFailed(result)
    return result.record

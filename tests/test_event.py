"""Tests for the full EventAccount decode pipeline."""

import pytest

from dticketsinspect.account.errors import (
    BufferUnderrun,
    EventDecodeFailed,
    ImplausibleCount,
    InvalidLength,
    InvalidOptionTag,
    TextDecodeError,
)
from dticketsinspect.account.event import (
    EVENT_ACCOUNT_FIELDS,
    decode_event_account,
    decode_event_account_or_raise,
)
from dticketsinspect.account.keys import Pubkey
from dticketsinspect.account.records import SUSPICIOUS_TAG, TicketAreaMapping
from dticketsinspect.config import DecoderLimits

from event_builder import (
    ORGANIZER,
    VENUE,
    decoded_length,
    enc_string,
    enc_u32,
    encode_event,
    offset_of,
)


class TestDecodeSuccess:

    def test_all_fields(self, event_bytes):
        result = decode_event_account(event_bytes)
        assert result.success
        assert result.error is None
        assert result.offset is None
        rec = result.record
        assert rec.organizer == Pubkey.from_bytes(ORGANIZER)
        assert rec.event_name == "Summer Festival"
        assert rec.venue_account == Pubkey.from_bytes(VENUE)
        assert rec.seat_map_hash == "QmSeatMap"
        assert rec.event_category == "music"
        assert rec.performer_details_hash == "QmPerformer"
        assert rec.contact_info_hash == "QmContact"
        assert rec.refund_policy_hash == "QmRefund"
        assert rec.total_tickets_minted == 500
        assert rec.total_tickets_sold == 321
        assert rec.total_revenue == 32_100_000_000
        assert rec.ticket_types_count == 2
        assert result.diagnostics == []

    def test_mapping_scenario(self):
        result = decode_event_account(encode_event(ticket_area_mappings=["VIP-A1", "GA-B2"]))
        assert result.record.ticket_area_mappings == [
            TicketAreaMapping("VIP-A1", "VIP", "A1"),
            TicketAreaMapping("GA-B2", "GA", "B2"),
        ]
        assert result.record.as_dict()["ticket_area_mappings"] == [
            {"type": "VIP", "area": "A1"},
            {"type": "GA", "area": "B2"},
        ]

    def test_unsplit_mapping(self):
        result = decode_event_account(encode_event(ticket_area_mappings=["VIPONLY"]))
        (mapping,) = result.record.ticket_area_mappings
        assert mapping.raw == "VIPONLY"
        assert not mapping.is_split

    def test_stops_before_trailing_fields(self, event_bytes):
        result = decode_event_account(event_bytes)
        assert result.bytes_consumed == decoded_length()
        assert result.bytes_consumed < len(event_bytes)

    def test_trailing_bytes_never_inspected(self):
        exact = encode_event()[:decoded_length()]
        result = decode_event_account(exact)
        assert result.success
        assert result.bytes_consumed == len(exact)

    def test_seat_map_absent_consumes_one_byte(self):
        values = dict(seat_map_hash=None)
        result = decode_event_account(encode_event(**values))
        assert result.success
        assert result.record.seat_map_hash is None
        start = offset_of("seat_map_hash", **values)
        assert offset_of("event_category", **values) == start + 1

    def test_negative_revenue(self):
        result = decode_event_account(encode_event(total_revenue=-5))
        assert result.record.total_revenue == -5

    def test_empty_mappings(self):
        result = decode_event_account(encode_event(ticket_area_mappings=[]))
        assert result.record.ticket_area_mappings == []

    def test_accepts_bytearray(self, event_bytes):
        assert decode_event_account(bytearray(event_bytes)).success

    def test_or_raise_returns_record(self, event_bytes):
        rec = decode_event_account_or_raise(event_bytes)
        assert rec.event_name == "Summer Festival"

    def test_field_sequence(self):
        names = [step.name for step in EVENT_ACCOUNT_FIELDS]
        assert names[0] == "discriminator"
        assert names[-1] == "ticket_area_mappings"
        surfaced = [step.name for step in EVENT_ACCOUNT_FIELDS if step.surfaced]
        assert len(surfaced) == 13


class TestDiagnostics:

    def test_unknown_status_is_warning(self):
        result = decode_event_account(encode_event(event_status=17))
        assert result.success
        (diag,) = result.diagnostics
        assert diag.kind == SUSPICIOUS_TAG
        assert diag.offset == offset_of("event_status")

    def test_unknown_pricing_strategy_is_warning(self):
        result = decode_event_account(encode_event(pricing_strategy_type=2))
        assert result.success
        assert result.diagnostics[0].offset == offset_of("pricing_strategy_type")


class TestDecodeFailure:

    @pytest.mark.parametrize("size", [0, 1, 7])
    def test_shorter_than_discriminator(self, size):
        result = decode_event_account(encode_event()[:size])
        assert not result.success
        assert isinstance(result.error, BufferUnderrun)
        assert result.offset == 0
        assert result.failed_field == "discriminator"
        assert result.partial == {}
        assert result.record is None

    def test_truncated_mid_record_keeps_partial(self):
        cut = offset_of("venue_account") + 10
        result = decode_event_account(encode_event()[:cut])
        assert isinstance(result.error, BufferUnderrun)
        assert result.failed_field == "venue_account"
        assert result.offset == offset_of("venue_account")
        assert result.partial == {
            "organizer": Pubkey.from_bytes(ORGANIZER),
            "event_name": "Summer Festival",
        }

    def test_invalid_string_length(self):
        # Over the bound and past the buffer end: the payload is never read.
        raw = {"event_category": enc_u32(1_000_000)}
        data = encode_event(raw=raw)[:offset_of("event_category", raw=raw) + 4]
        result = decode_event_account(data)
        assert isinstance(result.error, InvalidLength)
        assert result.failed_field == "event_category"
        assert result.offset == offset_of("event_category")
        assert "seat_map_hash" in result.partial

    def test_malformed_utf8(self):
        raw = {"contact_info_hash": enc_u32(2) + b"\xc3\x28"}
        result = decode_event_account(encode_event(raw=raw))
        assert isinstance(result.error, TextDecodeError)
        assert result.failed_field == "contact_info_hash"

    def test_invalid_option_tag(self):
        raw = {"seat_map_hash": b"\x02" + enc_string("QmSeatMap")}
        result = decode_event_account(encode_event(raw=raw))
        assert isinstance(result.error, InvalidOptionTag)
        assert result.error.tag == 2
        assert result.offset == offset_of("seat_map_hash")
        assert result.failed_field == "seat_map_hash"
        assert set(result.partial) == {"organizer", "event_name", "venue_account"}

    def test_implausible_vector_count(self):
        raw = {"ticket_area_mappings": enc_u32(5000) + enc_string("VIP-A1")}
        result = decode_event_account(encode_event(raw=raw))
        start = offset_of("ticket_area_mappings")
        assert isinstance(result.error, ImplausibleCount)
        assert result.offset == start
        assert result.bytes_consumed == start + 4
        assert result.partial["ticket_types_count"] == 2

    def test_vector_element_failure(self):
        raw = {"ticket_area_mappings": enc_u32(2) + enc_string("VIP-A1") + enc_u32(9999)}
        result = decode_event_account(encode_event(raw=raw))
        assert isinstance(result.error, InvalidLength)
        assert result.error.vector_offset == offset_of("ticket_area_mappings")

    def test_limits_are_configurable(self, event_bytes):
        result = decode_event_account(event_bytes, DecoderLimits(max_vector_len=1))
        assert isinstance(result.error, ImplausibleCount)
        assert result.error.bound == 1

        result = decode_event_account(event_bytes, DecoderLimits(max_string_len=5))
        assert isinstance(result.error, InvalidLength)
        assert result.failed_field == "event_name"

    def test_diagnostics_kept_on_failure(self):
        raw = {"ticket_area_mappings": enc_u32(101)}
        result = decode_event_account(encode_event(raw=raw, event_status=9))
        assert not result.success
        assert len(result.diagnostics) == 1

    def test_or_raise(self):
        with pytest.raises(EventDecodeFailed) as exc:
            decode_event_account_or_raise(b"\x00" * 4)
        assert exc.value.result.failed_field == "discriminator"
        assert exc.value.offset == 0


class TestRecordHelpers:

    @pytest.fixture
    def record(self):
        mappings = ["VIP-A1", "GA-B2", "VIP-A2", "VIPONLY", "GA-B2-East"]
        return decode_event_account(encode_event(ticket_area_mappings=mappings)).record

    def test_has_mapping(self, record):
        assert record.has_ticket_area_mapping("VIP", "A2")
        assert not record.has_ticket_area_mapping("VIP", "B2")

    def test_areas_for_ticket_type(self, record):
        assert record.areas_for_ticket_type("VIP") == ["A1", "A2"]
        assert record.areas_for_ticket_type("GA") == ["B2", "B2-East"]
        assert record.areas_for_ticket_type("VIPONLY") == []

    def test_ticket_types(self, record):
        assert record.ticket_types() == ["GA", "VIP"]

    def test_as_dict_order(self, record):
        d = record.as_dict()
        assert list(d)[:3] == ["organizer", "event_name", "venue_account"]
        assert d["organizer"] == str(Pubkey.from_bytes(ORGANIZER))

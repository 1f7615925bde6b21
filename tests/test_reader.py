"""Tests for the fixed-width account readers."""

import struct

import pytest

from dticketsinspect.account.errors import BufferUnderrun, DecodeError
from dticketsinspect.account.keys import Pubkey
from dticketsinspect.account.reader import (
    read_bool,
    read_fixed,
    read_i64,
    read_pubkey,
    read_u8,
    read_u32,
    read_u64,
    skip,
)
from dticketsinspect.account.records import SUSPICIOUS_TAG


class TestReadFixed:

    def test_returns_bytes_and_new_offset(self):
        value, offset = read_fixed(b"\x01\x02\x03\x04", 1, 2)
        assert value == b"\x02\x03"
        assert offset == 3

    def test_zero_length(self):
        assert read_fixed(b"", 0, 0) == (b"", 0)

    def test_exact_remaining(self):
        assert read_fixed(b"abc", 0, 3) == (b"abc", 3)

    def test_underrun_reports_needed_and_available(self):
        with pytest.raises(BufferUnderrun) as exc:
            read_fixed(b"abc", 1, 5)
        err = exc.value
        assert err.offset == 1
        assert err.cursor == 1
        assert err.needed == 5
        assert err.available == 2
        assert err.kind == "BufferUnderrun"
        assert isinstance(err, DecodeError)
        assert isinstance(err, ValueError)

    def test_negative_length_rejected(self):
        with pytest.raises(ValueError):
            read_fixed(b"abc", 0, -1)

    def test_accepts_memoryview(self):
        value, _ = read_fixed(memoryview(b"xyz"), 0, 2)
        assert value == b"xy"
        assert isinstance(value, bytes)


class TestIntegers:

    def test_u8(self):
        assert read_u8(b"\xff", 0) == (255, 1)

    def test_u32_little_endian(self):
        assert read_u32(b"\x00\x01\x00\x00\x00", 1) == (1, 5)

    def test_u64(self):
        assert read_u64(struct.pack("<Q", 2**64 - 1), 0) == (2**64 - 1, 8)

    def test_i64_negative(self):
        assert read_i64(struct.pack("<q", -42), 0) == (-42, 8)

    @pytest.mark.parametrize("reader,size", [
        (read_u8, 1), (read_u32, 4), (read_u64, 8), (read_i64, 8),
    ])
    def test_underrun(self, reader, size):
        with pytest.raises(BufferUnderrun) as exc:
            reader(b"\x00" * (size - 1), 0)
        assert exc.value.needed == size
        assert exc.value.available == size - 1


class TestReadBool:

    def test_false_and_true(self):
        diagnostics = []
        assert read_bool(b"\x00", 0, diagnostics) == (False, 1)
        assert read_bool(b"\x01", 0, diagnostics) == (True, 1)
        assert diagnostics == []

    def test_other_values_are_true_with_diagnostic(self):
        diagnostics = []
        value, offset = read_bool(b"\x00\x07", 1, diagnostics)
        assert value is True
        assert offset == 2
        assert len(diagnostics) == 1
        assert diagnostics[0].kind == SUSPICIOUS_TAG
        assert diagnostics[0].offset == 1

    def test_without_diagnostics_list(self):
        assert read_bool(b"\x05", 0) == (True, 1)

    def test_underrun(self):
        with pytest.raises(BufferUnderrun):
            read_bool(b"", 0)


class TestSkip:

    def test_advances(self):
        assert skip(b"\x00" * 10, 2, 8) == 10

    def test_underrun_does_not_advance(self):
        with pytest.raises(BufferUnderrun) as exc:
            skip(b"\x00" * 10, 4, 8)
        assert exc.value.offset == 4
        assert exc.value.available == 6


class TestReadPubkey:

    def test_reads_32_bytes(self):
        buf = b"\xaa" + bytes(range(32))
        key, offset = read_pubkey(buf, 1)
        assert key == Pubkey.from_bytes(bytes(range(32)))
        assert offset == 33

    def test_underrun(self):
        with pytest.raises(BufferUnderrun) as exc:
            read_pubkey(b"\x00" * 31, 0)
        assert exc.value.needed == 32

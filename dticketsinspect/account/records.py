"""Decoded event account dataclasses."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from dticketsinspect.account.errors import DecodeError
from dticketsinspect.account.keys import Pubkey

# Diagnostic kinds
SUSPICIOUS_TAG = "SuspiciousTag"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Non-fatal warning attached to a decode run."""
    kind: str
    offset: int
    message: str

    def __str__(self) -> str:
        return f"{self.kind} at offset {self.offset}: {self.message}"


@dataclass(frozen=True, slots=True)
class TicketAreaMapping:
    """One "<ticket type>-<area id>" entry. Unsplit entries keep only raw."""
    raw: str
    ticket_type: Optional[str] = None
    area: Optional[str] = None

    @property
    def is_split(self) -> bool:
        return self.ticket_type is not None

    def as_dict(self) -> dict[str, Any]:
        if self.is_split:
            return {"type": self.ticket_type, "area": self.area}
        return {"raw": self.raw}


@dataclass(slots=True)
class EventRecord:
    """Surfaced fields of an EventAccount, in on-chain order."""
    organizer: Pubkey
    event_name: str
    venue_account: Pubkey
    seat_map_hash: Optional[str]
    event_category: str
    performer_details_hash: str
    contact_info_hash: str
    refund_policy_hash: str
    total_tickets_minted: int
    total_tickets_sold: int
    total_revenue: int
    ticket_types_count: int
    ticket_area_mappings: list[TicketAreaMapping] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        """Ordered field name -> JSON-friendly value."""
        return {
            "organizer": str(self.organizer),
            "event_name": self.event_name,
            "venue_account": str(self.venue_account),
            "seat_map_hash": self.seat_map_hash,
            "event_category": self.event_category,
            "performer_details_hash": self.performer_details_hash,
            "contact_info_hash": self.contact_info_hash,
            "refund_policy_hash": self.refund_policy_hash,
            "total_tickets_minted": self.total_tickets_minted,
            "total_tickets_sold": self.total_tickets_sold,
            "total_revenue": self.total_revenue,
            "ticket_types_count": self.ticket_types_count,
            "ticket_area_mappings": [m.as_dict() for m in self.ticket_area_mappings],
        }

    def has_ticket_area_mapping(self, ticket_type: str, area: str) -> bool:
        return any(
            m.ticket_type == ticket_type and m.area == area
            for m in self.ticket_area_mappings
        )

    def areas_for_ticket_type(self, ticket_type: str) -> list[str]:
        """All area ids mapped to a ticket type, in stored order."""
        return [
            m.area for m in self.ticket_area_mappings
            if m.ticket_type == ticket_type
        ]

    def ticket_types(self) -> list[str]:
        """Sorted, de-duplicated ticket type names. Unsplit entries are ignored."""
        return sorted({m.ticket_type for m in self.ticket_area_mappings if m.is_split})


@dataclass
class DecodeResult:
    """Outcome of one decode run.

    On success ``record`` is set. On failure ``record`` is None and
    ``partial`` holds the fields captured before ``failed_field``.
    """
    record: Optional[EventRecord]
    bytes_consumed: int
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: Optional[DecodeError] = None
    failed_field: Optional[str] = None
    partial: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def offset(self) -> Optional[int]:
        """Offset of the failing read, or None on success."""
        return self.error.offset if self.error is not None else None

"""Format decode results as a text report."""
from __future__ import annotations

from dataclasses import fields

from dticketsinspect.account.records import DecodeResult, EventRecord, TicketAreaMapping

DRIFT_HINT = (
    "The account layout may have drifted from the decoder's assumptions. "
    "Check that the deployed program still matches the EventAccount field order."
)

_LABELS = {
    "organizer": "Organizer",
    "event_name": "Event name",
    "venue_account": "Venue",
    "seat_map_hash": "Seat map",
    "event_category": "Category",
    "performer_details_hash": "Performer details",
    "contact_info_hash": "Contact info",
    "refund_policy_hash": "Refund policy",
    "total_tickets_minted": "Tickets minted",
    "total_tickets_sold": "Tickets sold",
    "total_revenue": "Total revenue",
    "ticket_types_count": "Ticket types",
}


def _format_value(name: str, value) -> str:
    if value is None:
        return "(none)"
    if name == "total_revenue":
        return f"{value} lamports"
    return str(value)


def _format_mapping(index: int, mapping: TicketAreaMapping) -> str:
    if mapping.is_split:
        return f"  {index}. {mapping.ticket_type} -> {mapping.area}"
    return f"  {index}. (unsplit) {mapping.raw}"


def _format_fields(values: dict) -> list[str]:
    lines = []
    for name, label in _LABELS.items():
        if name in values:
            lines.append(f"{label + ':':<20}{_format_value(name, values[name])}")
    mappings = values.get("ticket_area_mappings")
    if mappings is not None:
        lines.append("")
        lines.append(f"Ticket-area mappings ({len(mappings)}):")
        for i, mapping in enumerate(mappings, 1):
            lines.append(_format_mapping(i, mapping))
    return lines


def _record_fields(record: EventRecord) -> dict:
    return {f.name: getattr(record, f.name) for f in fields(record)}


def format_report(result: DecodeResult) -> str:
    """Format a DecodeResult as human-readable text."""
    lines = ["=" * 60]

    if result.success:
        lines.append("Event account (decoded without IDL)")
        lines.append("=" * 60)
        lines.extend(_format_fields(_record_fields(result.record)))
        lines.append("")
        lines.append(f"Bytes consumed: {result.bytes_consumed}")
    else:
        error = result.error
        lines.append("Event account decode FAILED")
        lines.append("=" * 60)
        lines.append(f"Error:   {error.kind}")
        lines.append(f"Field:   {result.failed_field}")
        lines.append(f"Offset:  {error.offset}")
        lines.append(f"Detail:  {error}")
        if result.partial:
            lines.append("")
            lines.append("Fields decoded before the failure:")
            lines.extend(_format_fields(result.partial))
        lines.append("")
        lines.append(f"Hint: {DRIFT_HINT}")

    if result.diagnostics:
        lines.append("")
        lines.append(f"Warnings ({len(result.diagnostics)}):")
        for diag in result.diagnostics:
            lines.append(f"  - {diag}")

    return "\n".join(lines)

"""Enum lookup dicts for single-byte enum tags in event accounts."""
from __future__ import annotations


def lookup_enum(table: dict[int, str], value: int) -> str:
    """Return human-readable name for an enum value, or str(value) for unknowns."""
    return table.get(value, str(value))


# EventAccount.event_status
EVENT_STATUS: dict[int, str] = {
    0: "upcoming",
    1: "on_sale",
    2: "sold_out",
    3: "cancelled",
    4: "postponed",
    5: "completed",
}

# EventAccount.pricing_strategy_type
PRICING_STRATEGY: dict[int, str] = {
    0: "fixed_price",
    1: "dynamic_pricing",
}

"""Export decode results as JSON."""
from __future__ import annotations

import json
from typing import Any

from dticketsinspect.account.keys import Pubkey
from dticketsinspect.account.records import DecodeResult, TicketAreaMapping


def _jsonable(value: Any) -> Any:
    if isinstance(value, Pubkey):
        return str(value)
    if isinstance(value, TicketAreaMapping):
        return value.as_dict()
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def result_to_dict(result: DecodeResult) -> dict[str, Any]:
    data: dict[str, Any] = {
        "success": result.success,
        "bytes_consumed": result.bytes_consumed,
    }
    if result.success:
        data["record"] = result.record.as_dict()
    else:
        error = result.error
        data["error"] = {
            "kind": error.kind,
            "field": result.failed_field,
            "offset": error.offset,
            "message": str(error),
        }
        if error.vector_offset is not None:
            data["error"]["vector_offset"] = error.vector_offset
        data["partial"] = {name: _jsonable(v) for name, v in result.partial.items()}

    data["diagnostics"] = [
        {"kind": d.kind, "offset": d.offset, "message": d.message}
        for d in result.diagnostics
    ]
    return data


def export_json(result: DecodeResult) -> str:
    """Export a DecodeResult as a JSON string."""
    return json.dumps(result_to_dict(result), indent=2, ensure_ascii=False)

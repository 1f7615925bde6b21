"""Load event account bytes from local files.

Supported formats:
  raw:    the account data bytes as-is
  hex:    hex text (whitespace and a leading 0x are ignored)
  base64: base64 text
  json:   a getAccountInfo JSON-RPC response ({"result": {"value": {"data": [b64, "base64"]}}})
          or `solana account --output json` ({"account": {"data": [b64, "base64"]}})
"""
from __future__ import annotations

import base64
import binascii
import json
import re
from pathlib import Path

FORMATS = ("auto", "raw", "hex", "base64", "json")

_HEX_RE = re.compile(r"^(0x)?[0-9a-fA-F]*$")
_B64_RE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")


def _decode_hex(text: str) -> bytes:
    text = "".join(text.split())
    if text[:2].lower() == "0x":
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise ValueError(f"Invalid hex account data: {e}") from None


def _decode_base64(text: str) -> bytes:
    try:
        return base64.b64decode("".join(text.split()), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 account data: {e}") from None


def _data_field(doc: dict) -> object:
    """Find the account "data" entry in an RPC or CLI JSON document."""
    if "result" in doc:
        value = doc["result"]
        if isinstance(value, dict) and "value" in value:
            value = value["value"]
        if value is None:
            raise ValueError("Account does not exist (RPC returned null value)")
        if not isinstance(value, dict):
            raise ValueError("Unexpected RPC result shape")
        return value.get("data")
    if "account" in doc:
        account = doc["account"]
        if not isinstance(account, dict):
            raise ValueError("Unexpected account entry shape")
        return account.get("data")
    return doc.get("data")


def parse_account_json(text: str) -> bytes:
    """Extract account data bytes from a JSON document."""
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from None
    if not isinstance(doc, dict):
        raise ValueError("Expected a JSON object")

    data = _data_field(doc)
    if isinstance(data, list) and len(data) == 2:
        payload, encoding = data
        if not isinstance(payload, str):
            raise ValueError("Unexpected account data shape: payload is not a string")
        if encoding == "base64":
            return _decode_base64(payload)
        raise ValueError(f"Unsupported account data encoding: {encoding}")
    if isinstance(data, str):
        return _decode_base64(data)
    raise ValueError("No account data found in JSON document")


def _sniff(path: Path, raw: bytes) -> str:
    if path.suffix.lower() == ".json":
        return "json"
    try:
        text = raw.decode("ascii").strip()
    except UnicodeDecodeError:
        return "raw"
    compact = "".join(text.split())
    if not compact:
        return "raw"
    if _HEX_RE.match(compact) and len(compact.removeprefix("0x")) % 2 == 0:
        return "hex"
    if _B64_RE.match(compact) and len(compact) % 4 == 0:
        return "base64"
    return "raw"


def load_account_bytes(path: Path, fmt: str = "auto") -> bytes:
    """Read account data from path in the given format."""
    if fmt not in FORMATS:
        raise ValueError(f"Unknown format '{fmt}'. Choose from: {', '.join(FORMATS)}")

    raw = path.read_bytes()
    if fmt == "auto":
        fmt = _sniff(path, raw)

    if fmt == "raw":
        return raw
    text = raw.decode("utf-8")
    if fmt == "hex":
        return _decode_hex(text)
    if fmt == "base64":
        return _decode_base64(text)
    return parse_account_json(text)

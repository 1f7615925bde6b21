"""Config profiles describing which event account to inspect."""
from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import click

from dticketsinspect.account.keys import is_valid_pubkey
from dticketsinspect.config import DecoderLimits

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

_PROFILE_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")

DEFAULT_RPC_URL = "http://localhost:8899"


@dataclass
class Profile:
    """Either event_pda, or rpc_url + program_id + organizer + event_name."""
    name: str
    rpc_url: str = DEFAULT_RPC_URL
    program_id: Optional[str] = None
    organizer: Optional[str] = None
    event_name: Optional[str] = None
    event_pda: Optional[str] = None
    max_string_len: Optional[int] = None
    max_vector_len: Optional[int] = None

    def limits(self) -> DecoderLimits:
        """Decoder limits, with profile overrides applied."""
        defaults = DecoderLimits()
        return DecoderLimits(
            max_string_len=self.max_string_len if self.max_string_len is not None
            else defaults.max_string_len,
            max_vector_len=self.max_vector_len if self.max_vector_len is not None
            else defaults.max_vector_len,
        )


@dataclass
class Config:
    default_profile: str | None = None
    profiles: dict[str, Profile] = field(default_factory=dict)


def get_config_path() -> Path:
    """Return the TOML config file path via click.get_app_dir."""
    return Path(click.get_app_dir("dtix")) / "config.toml"


def _profile_from_toml(name: str, info: dict) -> Profile:
    return Profile(
        name=name,
        rpc_url=info.get("rpc_url", DEFAULT_RPC_URL),
        program_id=info.get("program_id"),
        organizer=info.get("organizer"),
        event_name=info.get("event_name"),
        event_pda=info.get("event_pda"),
        max_string_len=info.get("max_string_len"),
        max_vector_len=info.get("max_vector_len"),
    )


def load_config(path: Path | None = None) -> Config:
    """Read TOML config. Returns empty Config if file missing."""
    path = path or get_config_path()
    if not path.exists():
        return Config()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = Config(default_profile=data.get("default_profile"))
    for name, info in data.get("profiles", {}).items():
        config.profiles[name] = _profile_from_toml(name, info)
    return config


_TOML_ESCAPES = {
    "\\": "\\\\", '"': '\\"',
    "\b": "\\b", "\t": "\\t", "\n": "\\n", "\f": "\\f", "\r": "\\r",
}


def _toml_string(value: str) -> str:
    """Quote value as a TOML basic string. Control characters are escaped."""
    out = []
    for c in value:
        if c in _TOML_ESCAPES:
            out.append(_TOML_ESCAPES[c])
        elif c < " " or c == "\x7f":
            out.append(f"\\u{ord(c):04x}")
        else:
            out.append(c)
    return '"' + "".join(out) + '"'


def save_config(config: Config, path: Path | None = None) -> Path:
    """Write config to TOML."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    if config.default_profile:
        lines.append(f"default_profile = {_toml_string(config.default_profile)}")
    lines.append("")

    for name, profile in config.profiles.items():
        lines.append(f"[profiles.{name}]")
        for key in ("rpc_url", "program_id", "organizer", "event_name", "event_pda"):
            value = getattr(profile, key)
            if value is not None:
                lines.append(f"{key} = {_toml_string(value)}")
        for key in ("max_string_len", "max_vector_len"):
            value = getattr(profile, key)
            if value is not None:
                lines.append(f"{key} = {value}")
        lines.append("")

    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def validate_profile_name(name: str) -> bool:
    """Check that a profile name is a valid TOML bare key."""
    return bool(_PROFILE_NAME_RE.match(name))


def validate_profile(profile: Profile) -> list[str]:
    """Return problems that keep the profile from identifying an event account.

    An empty list means the profile is complete.
    """
    problems = []
    if profile.event_pda:
        if not is_valid_pubkey(profile.event_pda):
            problems.append(f"event_pda is not a valid address: {profile.event_pda}")
    else:
        missing = [
            key for key in ("program_id", "organizer", "event_name")
            if not getattr(profile, key)
        ]
        if missing:
            problems.append(
                "Set event_pda, or all of program_id, organizer and event_name "
                f"(missing: {', '.join(missing)})"
            )
        for key in ("program_id", "organizer"):
            value = getattr(profile, key)
            if value and not is_valid_pubkey(value):
                problems.append(f"{key} is not a valid address: {value}")

    problems.extend(validate_limits(profile))
    return problems


def validate_limits(profile: Profile) -> list[str]:
    """Return problems with the profile's decoder limit overrides."""
    problems = []
    for key in ("max_string_len", "max_vector_len"):
        value = getattr(profile, key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            problems.append(f"{key} must be a non-negative integer, got {value!r}")
    return problems


def resolve_profile(profile_name: str | None, path: Path | None = None) -> Profile:
    """Resolve --profile > default profile.

    Raises click.UsageError with a helpful message if nothing resolves.
    """
    config = load_config(path)

    name = profile_name or config.default_profile
    if name is None:
        raise click.UsageError(
            "No profile configured. Run 'dtix init' to set one up."
        )

    profile = config.profiles.get(name)
    if profile is None:
        available = ", ".join(config.profiles) or "(none)"
        raise click.UsageError(
            f"Profile '{name}' not found. Available profiles: {available}"
        )
    return profile

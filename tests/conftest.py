"""
pytest configuration and fixtures for event account decoder tests.

Provides:
- Hypothesis profiles (select with HYPOTHESIS_PROFILE)
- Encoded event account fixtures
- Isolated config file paths for profile/CLI tests, and no reads of the
  per-user config
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from event_builder import encode_event

# Default profile: balanced speed and coverage
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
)

# CI profile: more thorough testing
settings.register_profile(
    "ci",
    max_examples=500,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)

# Dev profile: fast iteration
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)

settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))


@pytest.fixture
def event_bytes():
    """A well-formed event account with two ticket-area mappings."""
    return encode_event()


@pytest.fixture
def config_path(tmp_path):
    """Path to a config.toml that does not exist yet."""
    return tmp_path / "dtix" / "config.toml"


@pytest.fixture(autouse=True)
def isolated_app_dir(tmp_path, monkeypatch):
    """Keep tests away from the per-user config file."""
    monkeypatch.setattr(
        "dticketsinspect.profiles.get_config_path",
        lambda: tmp_path / "app" / "config.toml",
    )

"""Default limits and layout constants for d-tickets account inspection."""
from dataclasses import dataclass


# Account layout constants
DISCRIMINATOR_SIZE = 8      # Anchor account discriminator
PUBKEY_SIZE = 32
TIMESTAMP_SIZE = 8          # i64 unix timestamps
COUNTER_SIZE = 4            # u32 ticket counters

# Sanity bounds. The program declares smaller max_len values, but accounts
# created by older builds are not guaranteed to respect them.
DEFAULT_MAX_STRING_LEN = 1024
DEFAULT_MAX_VECTOR_LEN = 100

# "<ticket type>-<area id>"
MAPPING_SEPARATOR = "-"


@dataclass(frozen=True)
class DecoderLimits:
    """Plausibility bounds applied while decoding variable-length fields."""
    max_string_len: int = DEFAULT_MAX_STRING_LEN
    max_vector_len: int = DEFAULT_MAX_VECTOR_LEN

    def __post_init__(self):
        if self.max_string_len < 0:
            raise ValueError(f"max_string_len must be >= 0, got {self.max_string_len}")
        if self.max_vector_len < 0:
            raise ValueError(f"max_vector_len must be >= 0, got {self.max_vector_len}")


DEFAULT_LIMITS = DecoderLimits()

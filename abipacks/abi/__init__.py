"""ABI normalization into the firmware definition format."""

from .normalizer import canonical_type, normalize, normalize_entry, selector
from .types import FIRMWARE_TYPE_INDEX, UnsupportedTypeError

__all__ = [
    "FIRMWARE_TYPE_INDEX",
    "UnsupportedTypeError",
    "canonical_type",
    "normalize",
    "normalize_entry",
    "selector",
]

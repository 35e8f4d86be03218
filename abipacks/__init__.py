"""Build hardware-wallet ABI packs from block-explorer contract ABIs."""

__version__ = "0.3.0"

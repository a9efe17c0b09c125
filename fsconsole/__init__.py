"""Command console and live log viewer for the EXT2 filesystem simulator backend."""

__version__ = "0.1.0"

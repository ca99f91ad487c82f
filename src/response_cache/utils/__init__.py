"""Utility modules for the response cache."""

from .compression import compress_text, decompress_text, maybe_compress

__all__ = [
    "compress_text",
    "decompress_text",
    "maybe_compress",
]

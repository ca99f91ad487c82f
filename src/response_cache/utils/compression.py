"""Reversible text compression for cached payloads."""

import base64
import zlib


def compress_text(text: str) -> str:
    """Compress text with zlib and encode it as ASCII-safe base64."""
    return base64.b64encode(zlib.compress(text.encode("utf-8"))).decode("ascii")


def decompress_text(data: str) -> str:
    """Reverse :func:`compress_text`."""
    return zlib.decompress(base64.b64decode(data)).decode("utf-8")


def maybe_compress(text: str, min_length: int) -> tuple[str, bool]:
    """Compress text when it is long enough and compression actually helps.

    Args:
        text: The payload
        min_length: Payloads shorter than this are stored as-is

    Returns:
        Tuple of (stored text, compressed flag)
    """
    if len(text) < min_length:
        return text, False
    packed = compress_text(text)
    if len(packed) >= len(text):
        return text, False
    return packed, True

"""Cache key derivation.

Keys are FNV-1a hashes of ``model:normalized_prompt:options``. The prompt
is normalized (case-folded, punctuation stripped, whitespace collapsed) and
truncated, so prompts that differ only beyond the prefix length share a key.
"""

import json
import re
from typing import Any

from response_cache.config import settings

_FNV_OFFSET_BASIS = 0x811C9DC5
_FNV_PRIME = 0x01000193

# \w is Unicode-aware, so Hangul and other scripts are kept
_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def _canonical(value: Any) -> Any:
    """Reduce an options value to JSON-safe data with a stable order.

    Mapping keys of any type become strings, and sets become sorted lists.
    Values json cannot encode are left for ``default=str``.
    """
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda item: (str(item[0]), type(item[0]).__name__))
        return {str(name): _canonical(inner) for name, inner in items}
    if isinstance(value, (list, tuple)):
        return [_canonical(inner) for inner in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_canonical(inner) for inner in value), key=repr)
    return value


def fnv1a_32(text: str) -> str:
    """Hash text with 32-bit FNV-1a.

    Args:
        text: The text to hash

    Returns:
        The hash as 8 lowercase hex digits
    """
    value = _FNV_OFFSET_BASIS
    for char in text:
        value ^= ord(char)
        value = (value * _FNV_PRIME) & 0xFFFFFFFF
    return f"{value:08x}"


class KeyDeriver:
    """Turns a raw request into a canonical, deterministic cache key.

    Example:
        ```python
        deriver = KeyDeriver()
        key = deriver.derive("Write chapter 1", "gemini-2.0-flash", {"temperature": 0.7})
        ```
    """

    def __init__(self, prefix_length: int | None = None) -> None:
        """Initialize the key deriver.

        Args:
            prefix_length: Number of normalized characters that take part
                in the key. Defaults to settings.
        """
        length = prefix_length if prefix_length is not None else settings.cache_key_prefix_length
        self._prefix_length = max(1, length)

    @property
    def prefix_length(self) -> int:
        """Get the normalization truncation length."""
        return self._prefix_length

    def normalize(self, prompt: str) -> str:
        """Normalize prompt text for keying and similarity.

        Args:
            prompt: Raw prompt text

        Returns:
            Case-folded text with punctuation removed, whitespace collapsed,
            truncated to the prefix length
        """
        text = _NON_WORD.sub("", prompt.casefold())
        text = _WHITESPACE.sub(" ", text).strip()
        return text[: self._prefix_length]

    @staticmethod
    def serialize_options(options: dict[str, Any] | None) -> str:
        """Serialize request options canonically (sorted keys, compact)."""
        if not options:
            return ""
        return json.dumps(
            _canonical(options),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        )

    def derive(
        self,
        prompt: str,
        model: str,
        options: dict[str, Any] | None = None,
    ) -> str:
        """Derive the cache key for a request.

        Args:
            prompt: Raw prompt text
            model: Model identifier
            options: Request options that change the response (temperature, ...)

        Returns:
            The cache key
        """
        normalized = self.normalize(prompt)
        serialized = self.serialize_options(options)
        return fnv1a_32(f"{model}:{normalized}:{serialized}")

"""Name normalization used to build and probe the name indexes."""

from typing import Iterator


MAX_PREFIX_LENGTH = 30


class TextNormalizer:
    """Turns employee names into index keys."""

    def __init__(self, max_prefix_length: int = MAX_PREFIX_LENGTH) -> None:
        """
        Initialize the normalizer.

        Args:
            max_prefix_length: Longest prefix that gets its own prefix bucket
        """
        self.max_prefix_length = max_prefix_length

    def normalize(self, text: str) -> str:
        """
        Normalize a name into its exact-name index key.

        Only case is folded; whitespace and punctuation are kept so that the
        key still matches the substring scan used by search.

        Args:
            text: Input name

        Returns:
            Lowercased name, empty string for None/empty input
        """
        if not text:
            return ""
        return text.lower()

    def iter_prefixes(self, key: str) -> Iterator[str]:
        """Yield every prefix of ``key`` from length 1 up to the prefix limit."""
        for length in range(1, min(self.max_prefix_length, len(key)) + 1):
            yield key[:length]

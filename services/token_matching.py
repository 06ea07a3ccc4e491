"""Token based matching, the coarse fallback used when fuzzy matching finds nothing."""

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional

from config import DEFAULT_OVERLAP_THRESHOLD
from models.category import Category

DEFAULT_STOP_WORDS = frozenset(
    {"the", "and", "or", "of", "for", "at", "to", "from", "in", "on", "by", "with"}
)
DEFAULT_MIN_TOKEN_LENGTH = 2

_XML_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
)


class TokenNormalizer:
    """Converts descriptions into sets of comparable tokens.

    "A & W" becomes "aw", "MCDONALD'S" becomes "mcdonalds", and
    "Amazon.ca*T23YP3F33" splits into amazon, ca and t23yp3f33. Purely numeric
    tokens, stop words and tokens shorter than ``min_token_length`` are dropped.
    """

    def __init__(
        self,
        stop_words: Iterable[str] = DEFAULT_STOP_WORDS,
        min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH,
    ):
        self.stop_words = frozenset(stop_words)
        self.min_token_length = min_token_length

    def normalize(self, description: Optional[str]) -> FrozenSet[str]:
        if not description or not description.strip():
            return frozenset()

        text = description
        for entity, char in _XML_ENTITIES:
            text = text.replace(entity, char)
        text = text.lower()

        # merge initials around ampersands before the ampersand is dropped
        text = re.sub(r"([a-z])\s*&\s*([a-z])", r"\1\2", text)
        text = re.sub(r"[-'&]", "", text)

        return frozenset(
            part for part in re.split(r"[^a-z0-9]+", text) if self._is_valid(part)
        )

    def _is_valid(self, token: str) -> bool:
        return (
            len(token) >= self.min_token_length
            and not token.isdigit()
            and token not in self.stop_words
        )


def overlap_ratio(search_tokens: FrozenSet[str], stored_tokens: FrozenSet[str]) -> float:
    """Matching tokens divided by the size of the smaller token set.

    Using the smaller set lets "shoppers drug" match "shoppers drug mart" and
    vice versa.
    """
    smallest = min(len(search_tokens), len(stored_tokens))
    if smallest == 0:
        return 0.0
    return len(search_tokens & stored_tokens) / smallest


@dataclass(frozen=True)
class TokenMatch:
    description: str
    category: Category
    overlap: float


def find_token_matches(
    description: str,
    index: Dict[str, Category],
    normalizer: TokenNormalizer,
    threshold: float = DEFAULT_OVERLAP_THRESHOLD,
) -> List[TokenMatch]:
    """Rank index entries by token overlap with ``description``.

    Returns:
        Matches at or above ``threshold``, sorted by overlap descending and then
        by description key.
    """
    search_tokens = normalizer.normalize(description)
    if not search_tokens:
        return []

    matches = []
    for key, category in index.items():
        ratio = overlap_ratio(search_tokens, normalizer.normalize(key))
        if ratio >= threshold:
            matches.append(TokenMatch(key, category, ratio))

    return sorted(matches, key=lambda m: (-m.overlap, m.description))

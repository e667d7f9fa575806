"""
Keyword extractor maintaining a restaurant's keyword index.

The index maps a lower-cased word to the number of times it occurs across the
restaurant's own text and its dishes' text. It is updated incrementally: text
entering the catalog is added, text leaving it is subtracted. No stemming,
stop-word removal or ranking is applied.
"""

import re
from typing import Iterable, Mapping, Optional

_NON_WORD = re.compile(r"\W+")


def tokenize(text: Optional[str]) -> list[str]:
    """Split text into lower-cased word tokens.

    Args:
        text: Free text, may be None

    Returns:
        Tokens in order of appearance, duplicates kept
    """
    if not text:
        return []
    return [token for token in _NON_WORD.split(text.lower()) if token]


def extract_and_count_keywords(
    existing: Optional[Mapping[str, int]],
    text: Optional[str],
    subtract: bool = False,
) -> dict[str, int]:
    """Add or subtract the words of a text to/from a keyword index.

    Args:
        existing: Current index (left untouched)
        text: Text whose words are counted; None or "" is a no-op
        subtract: Decrement instead of increment

    Returns:
        New index. Keys whose count drops to zero or below are removed;
        subtracting a word that is not indexed has no effect.
    """
    keywords = dict(existing or {})

    for token in tokenize(text):
        if not subtract:
            keywords[token] = keywords.get(token, 0) + 1
        elif token in keywords:
            count = keywords[token] - 1
            if count <= 0:
                del keywords[token]
            else:
                keywords[token] = count

    return keywords


class KeywordExtractor:
    """Applies text changes to keyword indexes."""

    def add(self, existing: Optional[Mapping[str, int]], *texts: Optional[str]) -> dict[str, int]:
        """Fold the words of each text into the index, in order."""
        keywords = dict(existing or {})
        for text in texts:
            keywords = extract_and_count_keywords(keywords, text)
        return keywords

    def remove(self, existing: Optional[Mapping[str, int]], *texts: Optional[str]) -> dict[str, int]:
        """Subtract the words of each text from the index, in order."""
        keywords = dict(existing or {})
        for text in texts:
            keywords = extract_and_count_keywords(keywords, text, subtract=True)
        return keywords

    def replace(
        self,
        existing: Optional[Mapping[str, int]],
        old_text: Optional[str],
        new_text: Optional[str],
    ) -> dict[str, int]:
        """Swap one text's contribution for another's."""
        keywords = self.remove(existing, old_text)
        return self.add(keywords, new_text)

    @staticmethod
    def query_tokens(query: Optional[str]) -> list[str]:
        """Distinct tokens of a search query, in order of first appearance."""
        return list(extract_and_count_keywords({}, query))

    @staticmethod
    def build_index(texts: Iterable[Optional[str]]) -> dict[str, int]:
        """Build an index from scratch out of several texts."""
        keywords: dict[str, int] = {}
        for text in texts:
            keywords = extract_and_count_keywords(keywords, text)
        return keywords

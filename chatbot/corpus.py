"""
Keyword Corpus
Searchable keyword variants (raw + stemmed) derived from the FAQ rules
"""

import logging
from typing import Callable, Iterator, Tuple

from .models import ChatbotDataset, KeywordIndexEntry

logger = logging.getLogger(__name__)


def build_corpus(dataset: ChatbotDataset, stem: Callable[[str], str]) -> Tuple[KeywordIndexEntry, ...]:
    """
    Index every keyword of every rule, in rule order then keyword order

    Args:
        dataset: Current FAQ rules
        stem: Stemming function applied to the lowercased keyword

    Returns:
        Tuple of index entries; identical datasets give identical tuples
    """
    entries = []
    for rule_index, rule in enumerate(dataset.rules):
        for keyword in rule.keywords:
            raw_keyword = keyword.lower()
            entries.append(KeywordIndexEntry(
                raw_keyword=raw_keyword,
                stemmed_keyword=stem(raw_keyword),
                owner_rule_index=rule_index,
            ))
    return tuple(entries)


class KeywordCorpus:
    """Immutable collection of keyword index entries"""

    def __init__(self, entries: Tuple[KeywordIndexEntry, ...] = ()):
        self._entries = tuple(entries)

    @classmethod
    def from_dataset(cls, dataset: ChatbotDataset, stem: Callable[[str], str]) -> 'KeywordCorpus':
        corpus = cls(build_corpus(dataset, stem))
        logger.debug(f"Built keyword corpus: {len(corpus)} entries from {len(dataset.rules)} rules")
        return corpus

    @property
    def entries(self) -> Tuple[KeywordIndexEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[KeywordIndexEntry]:
        return iter(self._entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, KeywordCorpus):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"KeywordCorpus({len(self._entries)} entries)"

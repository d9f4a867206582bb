"""
Chatbot Matchers
Vulnerability detection, exact keyword matching and fuzzy keyword search.

Vulnerability and exact matching are plain case-insensitive substring checks
where the first hit in list order wins. Fuzzy search scores the normalized
message against the keyword corpus with fuzzywuzzy.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from fuzzywuzzy import fuzz

from .config import ChatbotConfig
from .corpus import KeywordCorpus
from .models import ChatbotDataset, KeywordIndexEntry, ResponseRule, VulnerabilitySet
from .normalizer import Normalizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VulnerabilityMatch:
    keyword: str
    description: str


@dataclass(frozen=True)
class ExactMatch:
    rule: ResponseRule
    rule_index: int
    keyword: str


@dataclass(frozen=True)
class FuzzyMatch:
    entry: KeywordIndexEntry
    score: float


def detect_vulnerability(message: str, vulnerabilities: VulnerabilitySet) -> Optional[VulnerabilityMatch]:
    """
    Find the first vulnerability keyword contained in the raw message

    Rules are scanned in order, and keywords within a rule in order. No
    stemming or fuzzy logic is applied here.
    """
    lower_message = message.lower()
    for rule in vulnerabilities.rules:
        for keyword in rule.keywords:
            if keyword.lower() in lower_message:
                return VulnerabilityMatch(keyword=keyword, description=rule.description)
    return None


def match_exact(message: str, dataset: ChatbotDataset) -> Optional[ExactMatch]:
    """Return the first rule having a keyword contained in the raw message"""
    lower_message = message.lower()
    for rule_index, rule in enumerate(dataset.rules):
        for keyword in rule.keywords:
            if keyword.lower() in lower_message:
                return ExactMatch(rule=rule, rule_index=rule_index, keyword=keyword)
    return None


def keyword_distance(query: str, candidate: str) -> float:
    """
    Fuzzy distance between a query and a keyword: 0.0 is exact, 1.0 unrelated

    A query that fits inside the candidate is scored against its best-aligned
    substring, so where it sits in the keyword does not matter. A longer query
    is compared as a whole and pays for the extra length.
    """
    if len(query) <= len(candidate):
        similarity = fuzz.partial_ratio(query, candidate)
    else:
        similarity = fuzz.ratio(query, candidate)
    return 1.0 - similarity / 100.0


class FuzzyMatcher:
    """Approximate keyword search over the corpus"""

    def __init__(self, normalizer: Normalizer, config: Optional[ChatbotConfig] = None):
        self.normalizer = normalizer
        self.config = config or ChatbotConfig()

    def search(self, query: str, corpus: KeywordCorpus) -> List[Tuple[KeywordIndexEntry, float]]:
        """
        Score every entry against the query, keeping hits within the search threshold

        Each entry is scored on both its raw and stemmed keyword; the better
        of the two counts. Results are sorted by score, corpus order on ties.
        """
        if len(query) < self.config.min_match_char_length:
            return []

        hits = []
        for entry in corpus:
            score = min(
                keyword_distance(query, entry.raw_keyword),
                keyword_distance(query, entry.stemmed_keyword),
            )
            if score <= self.config.search_threshold:
                hits.append((entry, score))

        hits.sort(key=lambda hit: hit[1])
        return hits

    def match_fuzzy(self, message: str, corpus: KeywordCorpus) -> Optional[FuzzyMatch]:
        """
        Find the best fuzzy keyword match for a message

        The whole normalized message is searched first, then each token on
        its own, so a single strong keyword in a long sentence still counts.

        Returns:
            Best match if it scores below the accept threshold, else None
        """
        if not len(corpus):
            return None

        tokens = self.normalizer.normalize(message)
        queries = [' '.join(tokens)] + tokens

        best = None
        for query in queries:
            hits = self.search(query, corpus)
            if hits and (best is None or hits[0][1] < best.score):
                best = FuzzyMatch(entry=hits[0][0], score=hits[0][1])

        if best is None or best.score >= self.config.accept_threshold:
            return None

        logger.debug(f"Fuzzy match '{best.entry.raw_keyword}' ({best.score:.3f}) for: '{message}'")
        return best

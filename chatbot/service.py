"""
Chatbot Service
Classifies chat messages and picks the reply:
1. Vulnerability keywords (exact substring) unlock Break the Bot mode
2. Exact FAQ keyword match
3. Fuzzy FAQ keyword match on the lemmatized message
4. Fallback text

Rule data and the keyword corpus built from it are published together as one
immutable snapshot, so a refresh never exposes a half-updated state to
messages being processed at the same time.
"""

import random
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .config import ChatbotConfig
from .corpus import KeywordCorpus
from .data_service import DatasetProvider
from .errors import DataUnavailable, ProcessingError
from .formatter import ResponseFormatter
from .matchers import FuzzyMatcher, detect_vulnerability, match_exact
from .models import ChatbotDataset, ClassificationResult, MatchType, VulnerabilitySet
from .normalizer import Normalizer

logger = logging.getLogger(__name__)

BREAK_BOT_TEXT = (
    "🎉 Congratulations! You've unlocked a hidden mode - Break the Bot! "
    "The system will now enter debug mode for testing purposes."
)
ERROR_TEXT = "I'm experiencing some technical difficulties. Please try again."


@dataclass(frozen=True)
class ChatbotSnapshot:
    dataset: ChatbotDataset
    vulnerabilities: VulnerabilitySet
    corpus: KeywordCorpus


EMPTY_SNAPSHOT = ChatbotSnapshot(ChatbotDataset(), VulnerabilitySet(), KeywordCorpus())


class ChatbotService:
    """Keyword-driven support chatbot"""

    def __init__(self, provider: DatasetProvider, config: Optional[ChatbotConfig] = None,
                 normalizer: Optional[Normalizer] = None, rng: Optional[random.Random] = None,
                 load: bool = True):
        self.provider = provider
        self.config = config or ChatbotConfig()
        self.normalizer = normalizer or Normalizer()
        self.fuzzy_matcher = FuzzyMatcher(self.normalizer, self.config)
        self.formatter = ResponseFormatter(rng, self.config.disambiguation_threshold)

        self._snapshot = EMPTY_SNAPSHOT
        self._refresh_lock = threading.Lock()

        if load:
            try:
                self.refresh_data()
            except DataUnavailable:
                logger.error("❌ Chatbot data unavailable at startup, serving fallback replies only")

    @property
    def snapshot(self) -> ChatbotSnapshot:
        return self._snapshot

    @property
    def corpus(self) -> KeywordCorpus:
        return self._snapshot.corpus

    def refresh_data(self):
        """
        Reload both datasets and rebuild the keyword corpus

        The new snapshot is fully built before it replaces the current one.
        If either load fails the current snapshot stays in place.

        Raises:
            DataUnavailable: if the provider cannot supply the data
        """
        with self._refresh_lock:
            try:
                dataset = self.provider.load_chatbot_dataset()
                vulnerabilities = self.provider.load_vulnerability_set()
            except DataUnavailable as e:
                logger.error(f"Error loading chatbot data, keeping previous data: {e}")
                raise

            corpus = KeywordCorpus.from_dataset(dataset, self.normalizer.stem)
            self._snapshot = ChatbotSnapshot(dataset, vulnerabilities, corpus)

        logger.info(
            f"Chatbot data refreshed: {len(dataset.rules)} responses, "
            f"{len(vulnerabilities.rules)} vulnerabilities, {len(corpus)} keywords"
        )

    def process_message(self, message: str) -> ClassificationResult:
        """
        Classify a chat message and build the reply

        Never raises: unexpected failures come back as an ``error`` result.
        """
        original_message = message.strip() if isinstance(message, str) else str(message)
        try:
            return self._classify(original_message, self._snapshot)
        except Exception as e:
            error = ProcessingError(str(e))
            logger.error(f"Error processing message: {error}", exc_info=True)
            return ClassificationResult(
                text=ERROR_TEXT,
                match_type=MatchType.ERROR,
                original_message=original_message,
            )

    def _classify(self, message: str, snapshot: ChatbotSnapshot) -> ClassificationResult:
        # Vulnerabilities always preempt normal FAQ matching
        vulnerability = detect_vulnerability(message, snapshot.vulnerabilities)
        if vulnerability:
            logger.info(f"Vulnerability keyword '{vulnerability.keyword}' detected: {vulnerability.description}")
            return ClassificationResult(
                text=BREAK_BOT_TEXT,
                match_type=MatchType.VULNERABILITY,
                original_message=message,
                matched_keyword=vulnerability.keyword,
                trigger_break_bot=True,
                vulnerability_description=vulnerability.description,
            )

        exact = match_exact(message, snapshot.dataset)
        if exact:
            return ClassificationResult(
                text=self.formatter.format(exact.rule, MatchType.EXACT, exact.keyword),
                match_type=MatchType.EXACT,
                original_message=message,
                matched_keyword=exact.keyword,
                trigger_break_bot=exact.rule.trigger_break_bot,
            )

        fuzzy = self.fuzzy_matcher.match_fuzzy(message, snapshot.corpus)
        if fuzzy:
            rule = snapshot.dataset.rules[fuzzy.entry.owner_rule_index]
            keyword = fuzzy.entry.raw_keyword
            return ClassificationResult(
                text=self.formatter.format(rule, MatchType.FUZZY, keyword, fuzzy.score),
                match_type=MatchType.FUZZY,
                original_message=message,
                matched_keyword=keyword,
                fuzzy_score=fuzzy.score,
                trigger_break_bot=rule.trigger_break_bot,
            )

        return ClassificationResult(
            text=snapshot.dataset.fallback_text,
            match_type=MatchType.FALLBACK,
            original_message=message,
        )

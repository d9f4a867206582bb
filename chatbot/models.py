"""
Chatbot Data Model
Rules, datasets and per-message results used by the matching pipeline.

Raw data comes in two historical shapes (``answer`` vs ``answers``,
``description`` vs ``category``). Both are resolved here, once, so the
matchers only ever see the canonical form.
"""

import logging
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import MalformedRuleSkipped

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_TEXT = "I'm sorry, I couldn't understand that."
DEFAULT_VULNERABILITY_DESCRIPTION = "Vulnerability detected"


class MatchType(str, Enum):
    """How a message was classified"""

    VULNERABILITY = 'vulnerability'
    EXACT = 'exact'
    FUZZY = 'fuzzy'
    FALLBACK = 'fallback'
    ERROR = 'error'


def _clean_keywords(raw_keywords: Any) -> Tuple[str, ...]:
    if not isinstance(raw_keywords, (list, tuple)):
        raise ValueError("keywords must be a list")

    keywords = []
    for keyword in raw_keywords:
        if not isinstance(keyword, str):
            raise ValueError(f"keyword {keyword!r} is not a string")
        # Blank keywords would match every message
        if keyword.strip():
            keywords.append(keyword)

    if not keywords:
        raise ValueError("rule has no keywords")
    return tuple(keywords)


@dataclass(frozen=True)
class ResponseRule:
    """An FAQ entry: any keyword selects one of the answers"""

    keywords: Tuple[str, ...]
    answers: Tuple[str, ...]
    trigger_break_bot: bool = False

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'ResponseRule':
        """
        Build a rule from its stored JSON form

        Raises:
            ValueError: if keywords or answer texts are missing
        """
        if not isinstance(raw, dict):
            raise ValueError("rule must be an object")

        keywords = _clean_keywords(raw.get('keywords'))

        answers = raw.get('answers')
        if isinstance(answers, list) and answers:
            if not all(isinstance(answer, str) for answer in answers):
                raise ValueError("answers must be strings")
            answers = tuple(answers)
        elif isinstance(raw.get('answer'), str) and raw['answer']:
            # Older data stores a single answer
            answers = (raw['answer'],)
        else:
            raise ValueError("rule has no answer text")

        return cls(
            keywords=keywords,
            answers=answers,
            trigger_break_bot=bool(raw.get('triggerBreakBot', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'keywords': list(self.keywords),
            'answers': list(self.answers),
            'triggerBreakBot': self.trigger_break_bot,
        }


@dataclass(frozen=True)
class VulnerabilityRule:
    """A break-the-bot trigger; matched by exact substring only"""

    keywords: Tuple[str, ...]
    description: str = DEFAULT_VULNERABILITY_DESCRIPTION

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'VulnerabilityRule':
        if not isinstance(raw, dict):
            raise ValueError("vulnerability must be an object")

        keywords = _clean_keywords(raw.get('keywords'))
        description = raw.get('description') or raw.get('category') or DEFAULT_VULNERABILITY_DESCRIPTION
        return cls(keywords=keywords, description=str(description))

    def to_dict(self) -> Dict[str, Any]:
        return {'keywords': list(self.keywords), 'description': self.description}


def _parse_rules(raw_rules: List[Any], rule_cls, kind: str) -> Tuple[Any, ...]:
    """Parse each rule, dropping the malformed ones with a warning"""
    rules = []
    for position, raw_rule in enumerate(raw_rules):
        try:
            rules.append(rule_cls.from_dict(raw_rule))
        except ValueError as e:
            message = f"Skipping malformed {kind} #{position}: {e}"
            logger.warning(message)
            warnings.warn(message, MalformedRuleSkipped, stacklevel=3)
    return tuple(rules)


@dataclass(frozen=True)
class ChatbotDataset:
    rules: Tuple[ResponseRule, ...] = ()
    fallback_text: str = DEFAULT_FALLBACK_TEXT

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'ChatbotDataset':
        """
        Build a dataset from ``{"responses": [...], "fallback": "..."}``

        Raises:
            ValueError: if the top-level shape is wrong
        """
        if not isinstance(raw, dict):
            raise ValueError("chatbot data must be an object")

        responses = raw.get('responses', [])
        if not isinstance(responses, list):
            raise ValueError("'responses' must be a list")

        fallback = raw.get('fallback')
        if not isinstance(fallback, str) or not fallback.strip():
            fallback = DEFAULT_FALLBACK_TEXT

        return cls(rules=_parse_rules(responses, ResponseRule, 'response'), fallback_text=fallback)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'responses': [rule.to_dict() for rule in self.rules],
            'fallback': self.fallback_text,
        }


@dataclass(frozen=True)
class VulnerabilitySet:
    rules: Tuple[VulnerabilityRule, ...] = ()

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'VulnerabilitySet':
        if not isinstance(raw, dict):
            raise ValueError("vulnerability data must be an object")

        vulnerabilities = raw.get('vulnerabilities', [])
        if not isinstance(vulnerabilities, list):
            raise ValueError("'vulnerabilities' must be a list")

        return cls(rules=_parse_rules(vulnerabilities, VulnerabilityRule, 'vulnerability'))

    def to_dict(self) -> Dict[str, Any]:
        return {'vulnerabilities': [rule.to_dict() for rule in self.rules]}


@dataclass(frozen=True)
class KeywordIndexEntry:
    raw_keyword: str
    stemmed_keyword: str
    owner_rule_index: int


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one chat message"""

    text: str
    match_type: MatchType
    original_message: str
    matched_keyword: Optional[str] = None
    fuzzy_score: Optional[float] = None
    trigger_break_bot: bool = False
    vulnerability_description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape returned by the chat endpoint"""
        return {
            'text': self.text,
            'matchType': self.match_type.value,
            'matchedKeyword': self.matched_keyword,
            'fuzzyScore': self.fuzzy_score,
            'triggerBreakBot': self.trigger_break_bot,
            'vulnerabilityDescription': self.vulnerability_description,
            'originalMessage': self.original_message,
        }

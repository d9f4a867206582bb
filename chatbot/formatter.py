"""
Chatbot Response Formatter
Picks the answer text for a matched rule
"""

import random
from typing import Optional

from .models import MatchType, ResponseRule

NO_ANSWER_TEXT = "I found something, but I'm not sure how to respond."

DISAMBIGUATION_PREFIXES = [
    'I think you meant "{keyword}". ',
    'I understood you were asking about "{keyword}". ',
    'Based on your question about "{keyword}": ',
    'I believe you\'re asking about "{keyword}". ',
]


class ResponseFormatter:
    """Chooses one of a rule's answers at random, flagging uncertain fuzzy matches"""

    def __init__(self, rng: Optional[random.Random] = None, disambiguation_threshold: float = 0.3):
        self.rng = rng or random.Random()
        self.disambiguation_threshold = disambiguation_threshold

    def format(self, rule: ResponseRule, match_type: MatchType,
               matched_keyword: Optional[str] = None, fuzzy_score: Optional[float] = None) -> str:
        if rule.answers:
            text = self.rng.choice(rule.answers)
        else:
            text = NO_ANSWER_TEXT

        if (match_type == MatchType.FUZZY and fuzzy_score is not None
                and fuzzy_score > self.disambiguation_threshold):
            prefix = self.rng.choice(DISAMBIGUATION_PREFIXES)
            text = prefix.format(keyword=matched_keyword) + text

        return text

"""
Chatbot Errors
Exception types raised and handled by the chatbot engine
"""


class ChatbotError(Exception):
    """Base class for chatbot engine errors"""


class DataUnavailable(ChatbotError):
    """The dataset store is unreachable or returned malformed data"""


class NormalizationFailure(ChatbotError):
    """Text analysis failed; always recovered inside the normalizer"""


class ProcessingError(ChatbotError):
    """Unexpected failure while classifying a message"""


class MalformedRuleSkipped(UserWarning):
    """A rule was missing required fields and was dropped"""

"""
Event Support Chatbot
Keyword, lemma and fuzzy matching engine behind the event site's chat widget
"""

from .config import ChatbotConfig
from .data_service import DatasetProvider, JsonFileDataProvider
from .errors import ChatbotError, DataUnavailable, MalformedRuleSkipped
from .models import ChatbotDataset, ClassificationResult, MatchType, ResponseRule, VulnerabilityRule, VulnerabilitySet
from .service import ChatbotService

__all__ = [
    'ChatbotConfig',
    'ChatbotDataset',
    'ChatbotError',
    'ChatbotService',
    'ClassificationResult',
    'DataUnavailable',
    'DatasetProvider',
    'JsonFileDataProvider',
    'MalformedRuleSkipped',
    'MatchType',
    'ResponseRule',
    'VulnerabilityRule',
    'VulnerabilitySet',
]

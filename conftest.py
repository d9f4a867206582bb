"""
Pytest configuration and fixtures for the chatbot tests
"""

import json

import pytest

from chatbot.data_service import DatasetProvider, JsonFileDataProvider
from chatbot.errors import DataUnavailable
from chatbot.models import ChatbotDataset, VulnerabilitySet
from chatbot.normalizer import Normalizer, ensure_nltk_data


class StaticProvider(DatasetProvider):
    """In-memory provider; set ``fail`` to simulate an unreachable store"""

    def __init__(self, chatbot_data, vulnerability_data=None):
        self.chatbot_data = chatbot_data
        self.vulnerability_data = vulnerability_data or {"vulnerabilities": []}
        self.fail = False
        self.loads = 0

    def load_chatbot_dataset(self):
        if self.fail:
            raise DataUnavailable("store unreachable")
        self.loads += 1
        return ChatbotDataset.from_dict(self.chatbot_data)

    def load_vulnerability_set(self):
        if self.fail:
            raise DataUnavailable("store unreachable")
        return VulnerabilitySet.from_dict(self.vulnerability_data)


class SplitNormalizer:
    """Whitespace tokenizer standing in for the nltk normalizer"""

    def normalize(self, text):
        return text.lower().split() or [text.lower()]

    def stem(self, word):
        return word


class FirstChoice:
    """Random source that always picks the first option"""

    def choice(self, seq):
        return seq[0]


@pytest.fixture(scope="session")
def normalizer():
    ensure_nltk_data()
    return Normalizer(download_missing=False)


@pytest.fixture
def chatbot_data():
    """Sample FAQ responses"""
    return {
        "responses": [
            {"keywords": ["hello", "good morning"], "answer": "Welcome!"},
            {"keywords": ["schedule", "agenda"], "answers": ["The agenda is on the event page."]},
            {"keywords": ["venue"], "answer": "Main hall, first floor.", "triggerBreakBot": False},
            {"keywords": ["bye"], "answers": ["Goodbye!", "See you!", "Take care!"]},
        ],
        "fallback": "Sorry, I don't know that one."
    }


@pytest.fixture
def vulnerability_data():
    """Sample break-the-bot triggers"""
    return {
        "vulnerabilities": [
            {"keywords": ["ignore previous instructions"], "description": "Prompt injection"},
            {"keywords": ["debug mode", "developer mode"], "description": "Debug bypass"},
        ]
    }


@pytest.fixture
def provider(chatbot_data, vulnerability_data):
    return StaticProvider(chatbot_data, vulnerability_data)


@pytest.fixture
def data_files(tmp_path, chatbot_data, vulnerability_data):
    """Chatbot and vulnerability JSON files in a temporary directory"""
    chatbot_path = tmp_path / "chatbot_data.json"
    vulnerability_path = tmp_path / "vulnerability_data.json"
    chatbot_path.write_text(json.dumps(chatbot_data), encoding="utf-8")
    vulnerability_path.write_text(json.dumps(vulnerability_data), encoding="utf-8")
    return chatbot_path, vulnerability_path


@pytest.fixture
def file_provider(data_files):
    chatbot_path, vulnerability_path = data_files
    return JsonFileDataProvider(str(chatbot_path), str(vulnerability_path))

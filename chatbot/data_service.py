"""
Chatbot Data Service
Loads and saves the FAQ responses and vulnerability keywords as JSON files
"""

import os
import json
import logging
import tempfile
from typing import Any, Dict

from .errors import DataUnavailable
from .models import ChatbotDataset, VulnerabilitySet

logger = logging.getLogger(__name__)


class DatasetProvider:
    """Source of the datasets the chatbot serves from"""

    def load_chatbot_dataset(self) -> ChatbotDataset:
        raise NotImplementedError

    def load_vulnerability_set(self) -> VulnerabilitySet:
        raise NotImplementedError


class JsonFileDataProvider(DatasetProvider):
    """Reads ``{"responses": ..., "fallback": ...}`` and ``{"vulnerabilities": ...}`` files"""

    def __init__(self, chatbot_path: str, vulnerability_path: str):
        self.chatbot_path = chatbot_path
        self.vulnerability_path = vulnerability_path

    def _read_json(self, path: str) -> Any:
        try:
            with open(path, 'r', encoding='utf-8') as file:
                return json.load(file)
        except FileNotFoundError:
            raise DataUnavailable(f"Data file not found at {path}")
        except json.JSONDecodeError as e:
            raise DataUnavailable(f"Invalid JSON format in {path}: {e}")
        except OSError as e:
            raise DataUnavailable(f"Could not read {path}: {e}")

    def _write_json(self, path: str, data: Dict[str, Any]):
        """Write through a temporary file so readers never see a half-written file"""
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(suffix='.json', dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as file:
                json.dump(data, file, indent=2, ensure_ascii=False)
            os.replace(temp_path, path)
        except OSError as e:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise DataUnavailable(f"Could not write {path}: {e}")

    def load_chatbot_dataset(self) -> ChatbotDataset:
        raw = self._read_json(self.chatbot_path)
        try:
            dataset = ChatbotDataset.from_dict(raw)
        except ValueError as e:
            raise DataUnavailable(f"Malformed chatbot data in {self.chatbot_path}: {e}")
        logger.info(f"Loaded {len(dataset.rules)} chatbot responses from {self.chatbot_path}")
        return dataset

    def load_vulnerability_set(self) -> VulnerabilitySet:
        raw = self._read_json(self.vulnerability_path)
        try:
            vulnerabilities = VulnerabilitySet.from_dict(raw)
        except ValueError as e:
            raise DataUnavailable(f"Malformed vulnerability data in {self.vulnerability_path}: {e}")
        logger.info(f"Loaded {len(vulnerabilities.rules)} vulnerability rules from {self.vulnerability_path}")
        return vulnerabilities

    def save_chatbot_dataset(self, raw: Dict[str, Any]) -> ChatbotDataset:
        """
        Validate and store new chatbot data submitted by an admin

        Raises:
            ValueError: if ``responses`` or ``fallback`` is missing or mis-shaped
            DataUnavailable: if the file cannot be written
        """
        if not isinstance(raw, dict) or raw.get('responses') is None or not raw.get('fallback'):
            raise ValueError("Responses and fallback are required")
        if not isinstance(raw['responses'], list):
            raise ValueError("Responses must be an array")

        dataset = ChatbotDataset.from_dict(raw)
        self._write_json(self.chatbot_path, dataset.to_dict())
        logger.info(f"✅ Saved {len(dataset.rules)} chatbot responses to {self.chatbot_path}")
        return dataset

    def save_vulnerability_set(self, raw: Dict[str, Any]) -> VulnerabilitySet:
        """
        Validate and store new vulnerability keywords submitted by an admin

        Raises:
            ValueError: if ``vulnerabilities`` is missing or not a list
            DataUnavailable: if the file cannot be written
        """
        if not isinstance(raw, dict) or raw.get('vulnerabilities') is None:
            raise ValueError("Vulnerabilities are required")

        vulnerabilities = VulnerabilitySet.from_dict(raw)
        self._write_json(self.vulnerability_path, vulnerabilities.to_dict())
        logger.info(f"✅ Saved {len(vulnerabilities.rules)} vulnerability rules to {self.vulnerability_path}")
        return vulnerabilities

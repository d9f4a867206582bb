"""
Chatbot Configuration
Matching thresholds and data file locations, overridable from the environment
"""

import os
import logging
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'data')


def _env_value(name: str, default: T, cast: Callable[[str], T],
               minimum: Optional[T] = None, maximum: Optional[T] = None) -> T:
    """Read and convert an environment variable, keeping the default on bad or out-of-range input"""
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid value for {name}: {raw!r} (using {default})")
        return default
    # Written as "not within" so NaN is rejected too
    if (minimum is not None and not value >= minimum) or (maximum is not None and not value <= maximum):
        logger.warning(f"Ignoring out of range value for {name}: {raw!r} (using {default})")
        return default
    return value


@dataclass(frozen=True)
class ChatbotConfig:
    """Tunable knobs of the matching pipeline"""

    # Fuzzy distance a keyword must be within to be a search hit (0 = exact)
    search_threshold: float = 0.4
    # Best hit must score strictly below this to be used as the answer
    accept_threshold: float = 0.6
    # Fuzzy answers scoring above this get a "did you mean" prefix
    disambiguation_threshold: float = 0.3
    min_match_char_length: int = 2
    chatbot_data_path: str = os.path.join(DATA_DIR, 'chatbot_data.json')
    vulnerability_data_path: str = os.path.join(DATA_DIR, 'vulnerability_data.json')

    def __post_init__(self):
        for name in ('search_threshold', 'accept_threshold', 'disambiguation_threshold'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")
        if self.min_match_char_length < 1:
            raise ValueError("min_match_char_length must be at least 1")

    @classmethod
    def from_env(cls) -> 'ChatbotConfig':
        """Build the configuration from CHATBOT_* environment variables"""
        defaults = cls()
        return cls(
            search_threshold=_env_value(
                'CHATBOT_FUZZY_SEARCH_THRESHOLD', defaults.search_threshold, float, 0.0, 1.0
            ),
            accept_threshold=_env_value(
                'CHATBOT_FUZZY_ACCEPT_THRESHOLD', defaults.accept_threshold, float, 0.0, 1.0
            ),
            disambiguation_threshold=_env_value(
                'CHATBOT_DISAMBIGUATION_THRESHOLD', defaults.disambiguation_threshold, float, 0.0, 1.0
            ),
            min_match_char_length=_env_value(
                'CHATBOT_MIN_MATCH_LENGTH', defaults.min_match_char_length, int, minimum=1
            ),
            chatbot_data_path=os.getenv('CHATBOT_DATA_PATH') or defaults.chatbot_data_path,
            vulnerability_data_path=os.getenv('VULNERABILITY_DATA_PATH') or defaults.vulnerability_data_path,
        )

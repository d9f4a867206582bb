"""
Chatbot Text Normalizer
Turns raw chat text into canonical tokens using nltk part-of-speech tagging,
WordNet lemmatization and Porter stemming
"""

import re
import logging
from typing import List

import nltk
from nltk.stem import PorterStemmer, WordNetLemmatizer
from nltk.tag.perceptron import PerceptronTagger

from .errors import NormalizationFailure

logger = logging.getLogger(__name__)

# nltk resources needed by the perceptron tagger and the WordNet lemmatizer
NLTK_RESOURCES = [
    ('corpora/wordnet', 'wordnet'),
    ('corpora/omw-1.4', 'omw-1.4'),
    ('taggers/averaged_perceptron_tagger_eng', 'averaged_perceptron_tagger_eng'),
]

TOKEN_PATTERN = re.compile(r"[a-z0-9]+(?:'[a-z]+)?")


def ensure_nltk_data():
    """Download any missing nltk resource the normalizer relies on"""
    for resource_path, package in NLTK_RESOURCES:
        try:
            nltk.data.find(resource_path)
        except LookupError:
            logger.info(f"Downloading nltk resource: {package}")
            nltk.download(package, quiet=True)


class Normalizer:
    """Lemmatizes and stems chat messages for fuzzy keyword search"""

    def __init__(self, download_missing: bool = True):
        if download_missing:
            ensure_nltk_data()
        self.lemmatizer = WordNetLemmatizer()
        # Same algorithm as the stemmer the keyword data was originally tuned with
        self.stemmer = PorterStemmer(mode=PorterStemmer.ORIGINAL_ALGORITHM)

        # Models are loaded here, once, so message handling never reads from disk
        self.tagger = None
        try:
            self.tagger = PerceptronTagger()
            self.lemmatizer.lemmatize('events')
        except (LookupError, OSError) as e:
            logger.warning(f"nltk data unavailable, messages will not be lemmatized: {e}")

    def stem(self, word: str) -> str:
        return self.stemmer.stem(word)

    def normalize(self, text: str) -> List[str]:
        """
        Reduce text to lemmatized tokens

        Nouns come first (singular), then verbs (infinitive), then adjectives,
        then every other token longer than two characters in message order.
        Duplicates keep their first position.

        Args:
            text: Raw chat message

        Returns:
            Non-empty list of tokens; ``[text.lower()]`` if analysis fails
        """
        lowered = text.lower()
        try:
            tokens = self._analyze(lowered)
        except Exception as e:
            failure = NormalizationFailure(str(e))
            logger.debug(f"Normalization failed, using raw text: {failure!r}")
            return [lowered]

        return tokens if tokens else [lowered]

    def _analyze(self, lowered: str) -> List[str]:
        words = TOKEN_PATTERN.findall(lowered)
        if not words:
            return []

        nouns, verbs, adjectives = [], [], []
        if self.tagger is None:
            raise NormalizationFailure("part-of-speech tagger not loaded")

        for word, tag in self.tagger.tag(words):
            if tag.startswith('NN'):
                nouns.append(self.lemmatizer.lemmatize(word, pos='n'))
            elif tag.startswith('VB'):
                verbs.append(self.lemmatizer.lemmatize(word, pos='v'))
            elif tag.startswith('JJ'):
                adjectives.append(word)

        lemmas = nouns + verbs + adjectives
        captured = set(lemmas)
        remaining = [word for word in words if word not in captured and len(word) > 2]

        # dict preserves first-occurrence order
        return list(dict.fromkeys(lemmas + remaining))

"""
Scoring Models
==============
LDA topic model wrapper and lexicon sentiment scorer.
"""

from textmining.models.topic_model import TopicModel, LDABackend, SklearnLDA
from textmining.models.sentiment import SentimentScorer, Lexicon

__all__ = ["TopicModel", "LDABackend", "SklearnLDA", "SentimentScorer", "Lexicon"]

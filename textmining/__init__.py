"""
Text-Mining Scoring Pipeline
============================
Batch scoring core for exploratory analysis of literary corpora, tweets
and metadata: raw text -> tokens -> frequency table -> {tf-idf,
pairwise statistics, topic model, sentiment}.

Modules:
    tokenizer            - Word, n-gram and sentence tokenization
    frequency            - Per-document and corpus-wide term counts
    tfidf                - Term frequency / inverse document frequency
    pairwise             - Co-occurrence counts and phi correlations
    models.topic_model   - LDA wrapper exposing beta/gamma tables
    models.sentiment     - Lexicon join and per-group aggregation
    records              - Typed output records and hash joins
    corpus               - Corpus, stop-word and lexicon loading helpers
    cache                - Optional on-disk memoization of expensive steps
"""

from textmining.tokenizer import Tokenizer, TokenSequence
from textmining.frequency import FrequencyTable, build_frequency_table
from textmining.tfidf import TfIdfScorer, score_tf_idf
from textmining.pairwise import count_pairs, correlate_pairs
from textmining.models import TopicModel, SentimentScorer, Lexicon

__version__ = "1.0.0"

__all__ = [
    "Tokenizer", "TokenSequence",
    "FrequencyTable", "build_frequency_table",
    "TfIdfScorer", "score_tf_idf",
    "count_pairs", "correlate_pairs",
    "TopicModel", "SentimentScorer", "Lexicon",
]

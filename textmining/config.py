"""
config.py
---------
Centralised configuration for the text-mining pipeline.
Tuning parameters are read from environment variables with sensible
defaults. Stop words and lexicons are NOT configuration: they are passed
explicitly into every call that needs them.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass
class TokenizerConfig:
    """Token normalisation rules."""
    lowercase:         bool = True
    keep_non_alpha:    bool = False     # keep tokens without any letter
    ngram_n:           int  = int(os.getenv("TM_NGRAM_N", "2"))
    # n-grams keep stop words so negations ("not good") survive
    ngram_stop_words:  bool = False


@dataclass
class PairwiseConfig:
    """Grouping and pruning for co-occurrence statistics."""
    min_occurrences:   int  = int(os.getenv("TM_MIN_OCCURRENCES", "1"))
    section_size:      int  = int(os.getenv("TM_SECTION_SIZE", "10"))   # lines per section


@dataclass
class TopicModelConfig:
    """LDA fitting parameters."""
    k:                 int   = int(os.getenv("TM_TOPICS", "2"))
    seed:              int   = int(os.getenv("TM_SEED", "1234"))
    max_iter:          int   = int(os.getenv("TM_LDA_ITER", "50"))
    doc_topic_prior:   Optional[float] = None     # sklearn default 1/k when None
    topic_word_prior:  Optional[float] = None     # sklearn default 1/k when None


@dataclass
class SentimentConfig:
    """Lexicon aggregation defaults."""
    numeric_mode:      str  = "mean"    # mean | contribution
    positive_labels:   Tuple[str, ...] = ("positive",)
    negative_labels:   Tuple[str, ...] = ("negative",)
    negation_words:    Tuple[str, ...] = ("not", "no", "never", "without")


@dataclass
class LoggingConfig:
    level:             str = os.getenv("TEXTMINING_LOG_LEVEL", "INFO")
    log_dir:           str = os.getenv("TEXTMINING_LOG_DIR", "")


@dataclass
class PipelineConfig:
    """Master configuration aggregating all sub-configs."""
    tokenizer:  TokenizerConfig   = field(default_factory=TokenizerConfig)
    pairwise:   PairwiseConfig    = field(default_factory=PairwiseConfig)
    topics:     TopicModelConfig  = field(default_factory=TopicModelConfig)
    sentiment:  SentimentConfig   = field(default_factory=SentimentConfig)
    logging:    LoggingConfig     = field(default_factory=LoggingConfig)


# Default instance; components accept their own sub-config explicitly
CONFIG = PipelineConfig()

"""
conftest.py
-----------
Shared fixtures: small synthetic corpora with known counts, and the
project root on sys.path so the suite runs without installation.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from textmining.frequency import FrequencyTable
from textmining.tokenizer import Tokenizer


@pytest.fixture
def cat_dog_corpus():
    """Two documents sharing 'sat' (and the stop word 'the')."""
    return {"doc1": "the cat sat", "doc2": "the dog sat"}


@pytest.fixture
def tokenizer():
    return Tokenizer(stop_words={"the"})


@pytest.fixture
def cat_dog_table(tokenizer, cat_dog_corpus):
    return FrequencyTable.build(tokenizer.tokenize_corpus(cat_dog_corpus))


@pytest.fixture
def novel_corpus():
    """Two 'novels' of four chapters each with disjoint vocabularies."""
    sea = "whale sea ship harpoon captain whale sea ship harpoon voyage"
    society = "ballroom dance marriage estate fortune ballroom dance marriage estate sister"
    corpus = {}
    for i in range(4):
        corpus[f"moby_{i}"] = [sea, sea.replace("voyage", "storm")]
        corpus[f"pride_{i}"] = [society, society.replace("sister", "letter")]
    return corpus


@pytest.fixture
def novel_table(novel_corpus):
    return FrequencyTable.build(Tokenizer().tokenize_corpus(novel_corpus))

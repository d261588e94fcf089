"""
================================================================================
UNIT TESTS -- TOKENIZER
================================================================================
Tests cover:
    1. Word mode: lowercasing, apostrophes, stop words, letter predicate
    2. N-gram mode: space-joined windows, negations kept, typed domain
    3. Sentence mode (Punkt, default parameters)
    4. Section chunking helper
================================================================================
"""

import pytest

from textmining.config import TokenizerConfig
from textmining.tokenizer import Tokenizer, TokenSequence, sections, split_ngram


# ============================================================================
# TEST: WORD MODE
# ============================================================================

class TestWordMode:

    def test_stop_words_removed(self, tokenizer):
        tokens = tokenizer.tokenize("The cat sat")
        assert list(tokens) == ["cat", "sat"]

    def test_lowercased(self):
        tokens = Tokenizer().tokenize("Call me Ishmael")
        assert list(tokens) == ["call", "me", "ishmael"]

    def test_internal_apostrophes_kept(self):
        tokens = Tokenizer().tokenize(["Don't stop", "Darcy’s pride"])
        assert list(tokens) == ["don't", "stop", "darcy's", "pride"]

    def test_numeric_and_punctuation_dropped(self):
        tokens = Tokenizer().tokenize("In 1813, 3 sisters -- abc123!")
        assert list(tokens) == ["in", "sisters", "abc123"]

    def test_keep_non_alpha_on_request(self):
        tok = Tokenizer(TokenizerConfig(keep_non_alpha=True))
        tokens = tok.tokenize("In 1813, 3 sisters")
        assert list(tokens) == ["in", "1813", ",", "3", "sisters"]

    def test_stop_words_case_insensitive(self):
        tok = Tokenizer(stop_words={"THE", "And"})
        assert list(tok.tokenize("the whale and the sea")) == ["whale", "sea"]

    def test_result_is_reiterable(self, tokenizer):
        tokens = tokenizer.tokenize(["the cat sat", "on the mat"])
        assert list(tokens) == list(tokens)
        assert len(tokens) == 4

    def test_word_domain(self, tokenizer):
        tokens = tokenizer.tokenize("the cat")
        assert isinstance(tokens, TokenSequence)
        assert tokens.domain == ("word", 1)

    def test_empty_input(self, tokenizer):
        assert len(tokenizer.tokenize([])) == 0
        assert len(tokenizer.tokenize("the ...")) == 0

    def test_unknown_mode(self, tokenizer):
        with pytest.raises(ValueError):
            tokenizer.tokenize("text", mode="paragraph")

    def test_tokenize_corpus_keeps_ids(self, tokenizer, cat_dog_corpus):
        corpus = tokenizer.tokenize_corpus(cat_dog_corpus)
        assert set(corpus) == {"doc1", "doc2"}
        assert list(corpus["doc2"]) == ["dog", "sat"]


# ============================================================================
# TEST: N-GRAM MODE
# ============================================================================

class TestNgramMode:

    def test_bigrams_space_joined(self):
        grams = Tokenizer().tokenize("it is not good", mode="ngram", n=2)
        assert list(grams) == ["it is", "is not", "not good"]
        assert grams.domain == ("ngram", 2)

    def test_negation_survives_stop_words(self):
        tok = Tokenizer(stop_words={"not", "is", "it"})
        grams = tok.tokenize("it is not good", mode="ngram", n=2)
        assert "not good" in grams
        assert "good" not in grams

    def test_stop_word_ngrams_dropped_when_configured(self):
        tok = Tokenizer(TokenizerConfig(ngram_stop_words=True), stop_words={"the"})
        grams = tok.tokenize("the white whale", mode="ngram", n=2)
        assert list(grams) == ["white whale"]

    def test_windows_span_lines(self):
        grams = Tokenizer().tokenize(["call me", "ishmael"], mode="ngram", n=3)
        assert list(grams) == ["call me ishmael"]

    def test_split_ngram_inverts_encoding(self):
        grams = Tokenizer().tokenize("white whale", mode="ngram", n=2)
        assert split_ngram(grams[0]) == ("white", "whale")

    def test_n_required(self):
        with pytest.raises(ValueError):
            Tokenizer().tokenize("text", mode="ngram")
        with pytest.raises(ValueError):
            Tokenizer().tokenize("text", mode="ngram", n=0)

    def test_unigram_window_is_word_mode(self, tokenizer):
        grams = tokenizer.tokenize("the cat sat", mode="ngram", n=1)
        assert grams == tokenizer.tokenize("the cat sat")

    def test_short_document_yields_nothing(self):
        assert len(Tokenizer().tokenize("whale", mode="ngram", n=2)) == 0


# ============================================================================
# TEST: SENTENCE MODE
# ============================================================================

class TestSentenceMode:

    def test_splits_sentences(self):
        sents = Tokenizer().tokenize(
            ["Elizabeth laughed. Darcy did not!", "Was it fine?"], mode="sentence")
        assert len(sents) == 3
        assert sents[0] == "elizabeth laughed."
        assert sents.domain == ("sentence", 0)

    def test_whitespace_collapsed(self):
        sents = Tokenizer().tokenize(["It was   a dark", "night."], mode="sentence")
        assert list(sents) == ["it was a dark night."]

    def test_blank_text(self):
        assert len(Tokenizer().tokenize(["   ", ""], mode="sentence")) == 0


# ============================================================================
# TEST: SECTIONS
# ============================================================================

class TestSections:

    def test_line_number_floor_division(self):
        out = sections(["a", "b", "c", "d", "e"], 2)
        assert out == {0: ["a", "b"], 1: ["c", "d"], 2: ["e"]}

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            sections(["a"], 0)

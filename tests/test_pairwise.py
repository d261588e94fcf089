"""
================================================================================
UNIT TESTS -- PAIRWISE STATISTICS
================================================================================
Tests cover:
    1. Co-occurrence counts, each unordered pair emitted once
    2. Phi coefficient against hand-computed values
    3. Pruning by min_occurrences before the pairwise pass
    4. Undefined (zero-variance) correlations omitted
    5. Single-pair lookup: symmetry and unknown terms
================================================================================
"""

import math

import pytest

from textmining.corpus import section_corpus
from textmining.exceptions import UnknownTerm
from textmining.frequency import FrequencyTable
from textmining.pairwise import (correlate_pairs, count_pairs, pair_correlation,
                                 pairs_for, top_pairs)
from textmining.records import PairCorrelation, PairCount
from textmining.tokenizer import Tokenizer


@pytest.fixture
def groups():
    """Four groups: a and b always together, d alone."""
    return FrequencyTable.build({
        1: ["a", "b"],
        2: ["a", "b", "c", "a"],
        3: ["c"],
        4: ["d"],
    })


# ============================================================================
# TEST: COUNTS
# ============================================================================

class TestCountPairs:

    def test_known_counts(self, groups):
        assert count_pairs(groups) == [
            PairCount("a", "b", 2),
            PairCount("a", "c", 1),
            PairCount("b", "c", 1),
        ]

    def test_each_pair_once(self, novel_table):
        records = count_pairs(novel_table)
        keys = [frozenset((r.term_a, r.term_b)) for r in records]
        assert len(keys) == len(set(keys))
        assert all(r.term_a < r.term_b for r in records)

    def test_both_directions(self, groups):
        records = count_pairs(groups, both_directions=True)
        assert PairCount("b", "a", 2) in records
        assert len(records) == 6

    def test_single_term(self):
        assert count_pairs(FrequencyTable.build({1: ["a", "a"]})) == []


# ============================================================================
# TEST: CORRELATIONS
# ============================================================================

class TestCorrelatePairs:

    def test_known_values(self, groups):
        got = {(r.term_a, r.term_b): r.correlation for r in correlate_pairs(groups)}
        assert got[("a", "b")] == pytest.approx(1.0)
        assert got[("a", "c")] == pytest.approx(0.0)
        assert got[("a", "d")] == pytest.approx(-2 / math.sqrt(12))
        assert len(got) == 6

    def test_sorted_by_value_then_terms(self, groups):
        records = correlate_pairs(groups)
        assert [(r.term_a, r.term_b) for r in records] == [
            ("a", "b"), ("a", "c"), ("b", "c"), ("a", "d"), ("b", "d"), ("c", "d"),
        ]

    def test_pruning(self, groups):
        records = correlate_pairs(groups, min_occurrences=2)
        assert "d" not in {t for r in records for t in (r.term_a, r.term_b)}
        assert len(records) == 3

    def test_rare_term_pruned_in_large_grouping(self):
        corpus = {}
        for i in range(1000):
            tokens = ["even" if i % 2 == 0 else "odd"]
            if i % 3 == 0:
                tokens.append("third")
            if i == 0:
                tokens.append("rare")
            corpus[i] = tokens
        table = FrequencyTable.build(corpus)
        records = correlate_pairs(table, min_occurrences=5)
        assert records
        assert not pairs_for(records, "rare")
        assert pairs_for(records, "third")

    def test_constant_term_omitted(self, groups):
        everywhere = FrequencyTable.build({g: list(groups.terms(g)) + ["e"]
                                           for g in groups.doc_ids})
        records = correlate_pairs(everywhere)
        assert not pairs_for(records, "e")
        assert len(records) == 6

    def test_both_directions(self, groups):
        records = correlate_pairs(groups, both_directions=True)
        assert PairCorrelation("b", "a", 1.0) in records
        assert len(records) == 12

    def test_values_bounded(self, novel_table):
        for rec in correlate_pairs(novel_table):
            assert -1.0 <= rec.correlation <= 1.0


# ============================================================================
# TEST: SINGLE PAIR LOOKUP
# ============================================================================

class TestPairCorrelation:

    def test_symmetric(self, groups):
        ad = pair_correlation(groups, "a", "d")
        assert ad == pair_correlation(groups, "d", "a")
        assert ad == pytest.approx(-2 / math.sqrt(12))

    def test_unknown_term(self, groups):
        assert pair_correlation(groups, "a", "kraken") is None
        with pytest.raises(UnknownTerm) as exc:
            pair_correlation(groups, "kraken", "a", require=True)
        assert exc.value.term == "kraken"
        assert isinstance(exc.value, KeyError)

    def test_undefined(self):
        table = FrequencyTable.build({1: ["a", "e"], 2: ["b", "e"]})
        assert pair_correlation(table, "a", "e") is None


# ============================================================================
# TEST: HELPERS
# ============================================================================

class TestHelpers:

    def test_top_pairs(self, groups):
        assert top_pairs(count_pairs(groups), 1) == [PairCount("a", "b", 2)]

    def test_section_grouping(self):
        lines = ["whale sea", "whale ship", "ballroom dance", "ballroom estate"]
        tables = FrequencyTable.build(
            Tokenizer().tokenize_corpus(section_corpus({"moby": lines}, 2)))
        assert tables.doc_ids == (("moby", 0), ("moby", 1))
        counts = {(r.term_a, r.term_b): r.n for r in count_pairs(tables)}
        assert counts[("sea", "whale")] == 1
        assert ("dance", "whale") not in counts

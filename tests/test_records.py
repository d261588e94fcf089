"""
================================================================================
UNIT TESTS -- RECORDS, CORPUS LOADING, CACHE & UTILITIES
================================================================================
Tests cover:
    1. Hash joins (inner / left / outer) on a declared key
    2. Record to DataFrame conversion
    3. Corpus, stop-word and lexicon loaders
    4. joblib-backed memoization
    5. Package logging: one line per record, level set once for all modules
    6. Id ordering and configuration defaults
================================================================================
"""

import logging

import pytest

from textmining.cache import cache_key, memoize
from textmining.config import CONFIG, PipelineConfig, TokenizerConfig
from textmining.corpus import (SAMPLE_CORPUS, load_lexicon, load_stop_words,
                               read_corpus, section_corpus)
from textmining.frequency import FrequencyTable
from textmining.records import (TermCount, join_records, record_fields,
                                record_to_dict, records_to_frame)
from textmining.utils import get_logger, setup_logging, sorted_ids


# ============================================================================
# TEST: JOINS
# ============================================================================

class TestJoin:

    @pytest.fixture
    def counts(self):
        return [TermCount("d1", "good", 2), TermCount("d1", "whale", 1),
                TermCount("d2", "bad", 1)]

    @pytest.fixture
    def lexicon(self):
        return [{"term": "good", "value": 3}, {"term": "bad", "value": -3},
                {"term": "awful", "value": -4}]

    def test_inner(self, counts, lexicon):
        rows = join_records(counts, lexicon, key="term")
        assert rows == [
            {"doc_id": "d1", "term": "good", "n": 2, "value": 3},
            {"doc_id": "d2", "term": "bad", "n": 1, "value": -3},
        ]

    def test_left(self, counts, lexicon):
        rows = join_records(counts, lexicon, key="term", how="left")
        assert len(rows) == 3
        assert rows[1] == {"doc_id": "d1", "term": "whale", "n": 1, "value": None}

    def test_outer(self, counts, lexicon):
        rows = join_records(counts, lexicon, key="term", how="outer")
        assert len(rows) == 4
        assert rows[-1] == {"doc_id": None, "n": None, "term": "awful", "value": -4}

    def test_shared_field_suffixed(self):
        rows = join_records([{"k": 1, "v": "left"}], [{"k": 1, "v": "right"}], key="k")
        assert rows == [{"k": 1, "v": "left", "v_right": "right"}]

    def test_duplicate_right_keys_fan_out(self):
        rows = join_records([{"k": 1}], [{"k": 1, "v": 1}, {"k": 1, "v": 2}], key="k")
        assert [r["v"] for r in rows] == [1, 2]

    def test_invalid_mode(self, counts, lexicon):
        with pytest.raises(ValueError):
            join_records(counts, lexicon, key="term", how="cross")


class TestRecords:

    def test_to_dict(self):
        assert record_to_dict(TermCount("d", "t", 1)) == {"doc_id": "d", "term": "t", "n": 1}
        with pytest.raises(TypeError):
            record_to_dict(42)

    def test_frame(self):
        df = records_to_frame([TermCount("d", "a", 1), TermCount("d", "b", 2)])
        assert list(df.columns) == record_fields(TermCount)
        assert df["n"].sum() == 3
        assert records_to_frame([]).empty

    def test_frozen(self):
        rec = TermCount("d", "a", 1)
        with pytest.raises(AttributeError):
            rec.n = 2


# ============================================================================
# TEST: LOADERS
# ============================================================================

class TestLoaders:

    def test_read_corpus(self, tmp_path):
        (tmp_path / "moby.txt").write_text("Call me Ishmael.\nSome years ago\n", encoding="utf-8")
        (tmp_path / "emma.txt").write_text("Emma Woodhouse\n", encoding="utf-8")
        (tmp_path / "notes.md").write_text("ignored\n", encoding="utf-8")
        corpus = read_corpus(tmp_path)
        assert list(corpus) == ["emma", "moby"]
        assert corpus["moby"] == ["Call me Ishmael.", "Some years ago"]

    def test_read_corpus_missing_directory(self, tmp_path):
        with pytest.raises(ValueError):
            read_corpus(tmp_path / "absent")

    def test_load_stop_words(self, tmp_path):
        path = tmp_path / "stop.txt"
        path.write_text("# english\nThe\n\nand\n", encoding="utf-8")
        assert load_stop_words(path) == frozenset({"the", "and"})

    def test_load_lexicon(self, tmp_path):
        path = tmp_path / "afinn.csv"
        path.write_text("word,value,source\ngood,3,a\nbad,-3,a\n", encoding="utf-8")
        lex = load_lexicon(path)
        assert lex.name == "afinn"
        assert dict(lex) == {"good": 3.0, "bad": -3.0}

    def test_section_corpus(self):
        sections = section_corpus(SAMPLE_CORPUS, 3)
        assert ("pride_ch1", 0) in sections
        assert sections[("pride_ch1", 2)] == SAMPLE_CORPUS["pride_ch1"][6:]
        assert sum(len(v) for v in sections.values()) == \
            sum(len(v) for v in SAMPLE_CORPUS.values())


# ============================================================================
# TEST: CACHE
# ============================================================================

calls = []


def slow_square(x):
    calls.append(x)
    return x * x


class TestCache:

    def test_memoize_reuses_result(self, tmp_path):
        calls.clear()
        assert memoize(str(tmp_path), slow_square, 4) == 16
        assert memoize(str(tmp_path), slow_square, 4) == 16
        assert calls == [4]
        assert len(list(tmp_path.glob("*.pkl"))) == 1

    def test_key_depends_on_arguments(self):
        assert cache_key(slow_square, 1) != cache_key(slow_square, 2)
        assert cache_key(slow_square, x=1) == cache_key(slow_square, x=1)


# ============================================================================
# TEST: UTILITIES & CONFIG
# ============================================================================

class TestUtils:

    def test_sorted_ids_natural(self):
        assert sorted_ids([3, 1, 2]) == [1, 2, 3]

    def test_sorted_ids_mixed_types(self):
        ids = ["b", 2, "a", 1]
        assert sorted_ids(ids) == sorted_ids(list(reversed(ids)))

    def test_config_defaults(self):
        assert isinstance(CONFIG, PipelineConfig)
        assert TokenizerConfig().lowercase is True
        assert TokenizerConfig().ngram_stop_words is False
        assert CONFIG.sentiment.numeric_mode == "mean"
        assert "not" in CONFIG.sentiment.negation_words


# ============================================================================
# TEST: LOGGING
# ============================================================================

@pytest.fixture
def package_logger():
    logger = logging.getLogger("textmining")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestLogging:

    def test_module_loggers_have_no_handlers(self):
        log = get_logger("textmining.frequency")
        assert log is get_logger("textmining.frequency")
        assert log.handlers == []
        assert log.level == logging.NOTSET

    def test_each_record_emitted_once(self, package_logger, capsys):
        setup_logging("DEBUG")
        FrequencyTable.build({"a": ["x"], "b": []})
        err = capsys.readouterr().err
        assert err.count("1 of 2 documents have no terms after filtering") == 1
        assert "| DEBUG    | textmining.frequency | Built frequency table" in err

    def test_setup_replaces_handlers_and_level(self, package_logger, capsys):
        setup_logging("DEBUG")
        setup_logging("WARNING")
        assert len(package_logger.handlers) == 1
        FrequencyTable.build({"a": ["x"], "b": []})
        err = capsys.readouterr().err
        assert "Built frequency table" not in err
        assert err.count("have no terms after filtering") == 1

"""
================================================================================
LEXICON SENTIMENT SCORER
================================================================================
Joins a FrequencyTable against an external sentiment lexicon and
aggregates the matches per document or group.

Two lexicon shapes:
    numeric      {term: value}, e.g. AFINN-style integers in [-5, 5]
    categorical  {term: label}, e.g. {"positive", "negative"} (Bing-style)

Aggregation modes:
    mean          numeric      S(g) = sum(value * n) / sum(n)   per group
    contribution  numeric      C(t) = sum(value * n)            per term
    net           categorical  S(g) = n_positive - n_negative   per group

Join semantics are INNER: only terms present in the lexicon contribute;
absence from the lexicon is not an error. A join with zero matches usually
means the lexicon and tokens were normalised differently (case, language).
It is reported with a LexiconMismatchWarning, not raised.

Word terms and n-gram terms are distinct domains: a table is joined only
against the lexicon entries of its own arity, so the phrase entries of a
mixed lexicon (AFINN's "can't stand") are ignored when scoring words and a
lexicon with no entries of the table's arity is refused. Negated bigrams
("not good") are handled separately by negation_contributions(), which looks
up the second word and reports its contribution so it can be reversed or
discounted by the caller.
================================================================================
"""

import numbers
import warnings
from collections.abc import Mapping
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Union

import pandas as pd

from textmining.config import SentimentConfig
from textmining.exceptions import LexiconMismatchWarning
from textmining.frequency import FrequencyTable
from textmining.records import NegationRecord, SentimentRecord, join_records
from textmining.tokenizer import split_ngram
from textmining.utils import get_logger

log = get_logger(__name__)

NUMERIC_MODES = ("mean", "contribution")
CATEGORICAL_MODES = ("net",)

Grouping = Union[None, Mapping, Callable[[Hashable], Hashable]]


class Lexicon(Mapping):
    """
    Read-only sentiment lexicon.

    Parameters
    ----------
    entries : mapping term -> numeric value or categorical label
    name : optional label used in log messages

    Attributes
    ----------
    kind : 'numeric' or 'categorical'
    arities : sorted word counts of the entries; phrase entries such as
        "can't stand" sit beside single words and only ever match tables
        of the same arity
    """

    def __init__(self, entries: Mapping, name: Optional[str] = None):
        entries = dict(entries)
        if not entries:
            raise ValueError("lexicon is empty")

        values = list(entries.values())
        if all(isinstance(v, numbers.Real) and not isinstance(v, bool) for v in values):
            self.kind = "numeric"
            entries = {t: float(v) for t, v in entries.items()}
        elif all(isinstance(v, str) for v in values):
            self.kind = "categorical"
        else:
            raise ValueError("lexicon values must be all numeric or all string labels")

        self._by_arity: Dict[int, Dict[str, object]] = {}
        for term, value in entries.items():
            self._by_arity.setdefault(len(split_ngram(term)), {})[term] = value
        self.arities = tuple(sorted(self._by_arity))
        self.name = name or "lexicon"
        self._entries = entries

    @classmethod
    def from_frame(cls, df: pd.DataFrame, term_col: str = "word",
                   value_col: str = "value", name: Optional[str] = None) -> "Lexicon":
        """Build from a two-column DataFrame; duplicate terms keep the first value."""
        dedup = df.drop_duplicates(subset=term_col, keep="first")
        return cls(dict(zip(dedup[term_col], dedup[value_col])), name=name)

    def __getitem__(self, term: str):
        return self._entries[term]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def records(self, arity: Optional[int] = None) -> List[Dict[str, object]]:
        """Entries as term/value dicts, optionally only those of one arity."""
        entries = self._entries if arity is None else self._by_arity.get(arity, {})
        return [{"term": t, "value": v} for t, v in entries.items()]

    def __repr__(self) -> str:
        return f"Lexicon({self.name!r}, kind={self.kind!r}, terms={len(self)}, arities={self.arities})"


class SentimentScorer:
    """
    Lexicon join + aggregation over a FrequencyTable.

    Parameters
    ----------
    lexicon : Lexicon or mapping (wrapped in a Lexicon)
    config : SentimentConfig, optional
        Default numeric mode, categorical labels, negation words.
    """

    def __init__(self, lexicon: Union[Lexicon, Mapping],
                 config: Optional[SentimentConfig] = None):
        self.lexicon = lexicon if isinstance(lexicon, Lexicon) else Lexicon(lexicon)
        self.config = config or SentimentConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def score(self, table: FrequencyTable, grouping: Grouping = None,
              mode: Optional[str] = None) -> List[SentimentRecord]:
        """
        Aggregate lexicon matches.

        Parameters
        ----------
        table : FrequencyTable whose term domain matches the lexicon
        grouping : None (per document), mapping doc_id -> group, or callable
        mode : 'mean' | 'contribution' (numeric), 'net' (categorical).
            Defaults to config.numeric_mode or 'net'.

        Returns
        -------
        list of SentimentRecord; groups in table order, or terms by
        |contribution| desc in contribution mode. Empty when nothing matched.
        """
        mode = self._resolve_mode(mode)
        self._check_domain(table)

        matches = join_records(table.rows, self.lexicon.records(table.arity),
                               key="term", how="inner")
        if not matches:
            self._warn_mismatch(table)
            return []
        log.debug("%s matched %d of %d rows", self.lexicon.name, len(matches), len(table))

        if mode == "contribution":
            return self._contributions(matches)

        group_of = self._group_function(grouping)
        sums: Dict[Hashable, float] = {}
        weights: Dict[Hashable, int] = {}
        for row in matches:
            group = group_of(row["doc_id"])
            if mode == "mean":
                delta = row["value"] * row["n"]
                weight = row["n"]
            else:
                delta, weight = self._polarity(row["value"], row["n"])
                if weight == 0:
                    continue
            sums[group] = sums.get(group, 0.0) + delta
            weights[group] = weights.get(group, 0) + weight

        if mode == "mean":
            return [SentimentRecord(g, sums[g] / weights[g], weights[g]) for g in sums]
        return [SentimentRecord(g, float(sums[g]), weights[g]) for g in sums]

    def negation_contributions(
        self,
        bigram_table: FrequencyTable,
        negation_words: Optional[Iterable[str]] = None,
    ) -> List[NegationRecord]:
        """
        Contributions of words directly preceded by a negation word.

        Splits every bigram 'w1 w2' with w1 in ``negation_words`` and looks
        up w2 in the (unigram, numeric) lexicon, so "not good" is scored
        separately from the unigram "good".

        Returns
        -------
        list of NegationRecord sorted by |contribution| desc, then words.
        """
        if bigram_table.arity != 2 or bigram_table.kind != "ngram":
            raise ValueError(f"negation analysis needs a bigram table, got "
                             f"{bigram_table.kind} arity {bigram_table.arity}")
        if self.lexicon.kind != "numeric" or 1 not in self.lexicon.arities:
            raise ValueError("negation analysis needs a numeric unigram lexicon")

        negations = frozenset(negation_words if negation_words is not None
                              else self.config.negation_words)
        counts: Dict[tuple, int] = {}
        for row in bigram_table.rows:
            first, second = split_ngram(row.term)
            if first in negations and second in self.lexicon:
                counts[(first, second)] = counts.get((first, second), 0) + row.n

        if not counts:
            self._warn_mismatch(bigram_table)
            return []

        records = [NegationRecord(first, second, n, self.lexicon[second],
                                  self.lexicon[second] * n)
                   for (first, second), n in counts.items()]
        return sorted(records, key=lambda r: (-abs(r.contribution), r.negation, r.word))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_mode(self, mode: Optional[str]) -> str:
        if self.lexicon.kind == "numeric":
            mode = mode or self.config.numeric_mode
            allowed = NUMERIC_MODES
        else:
            mode = mode or "net"
            allowed = CATEGORICAL_MODES
        if mode not in allowed:
            raise ValueError(f"mode {mode!r} is not valid for a {self.lexicon.kind} "
                             f"lexicon; expected one of {allowed}")
        return mode

    def _check_domain(self, table: FrequencyTable) -> None:
        if table.kind == "sentence" or table.arity not in self.lexicon.arities:
            raise ValueError(
                f"{self.lexicon.name} holds terms of {list(self.lexicon.arities)} words but the "
                f"table holds {table.kind} terms of arity {table.arity}")

    @staticmethod
    def _group_function(grouping: Grouping) -> Callable[[Hashable], Hashable]:
        if grouping is None:
            return lambda doc_id: doc_id
        if isinstance(grouping, Mapping):
            return lambda doc_id: grouping[doc_id]
        if callable(grouping):
            return grouping
        raise TypeError(f"grouping must be None, a mapping or a callable, "
                        f"got {type(grouping).__name__}")

    def _polarity(self, label: str, n: int):
        if label in self.config.positive_labels:
            return n, n
        if label in self.config.negative_labels:
            return -n, n
        return 0, 0

    @staticmethod
    def _contributions(matches: List[Dict]) -> List[SentimentRecord]:
        contribution: Dict[str, float] = {}
        n_matched: Dict[str, int] = {}
        for row in matches:
            term = row["term"]
            contribution[term] = contribution.get(term, 0.0) + row["value"] * row["n"]
            n_matched[term] = n_matched.get(term, 0) + row["n"]
        records = [SentimentRecord(t, contribution[t], n_matched[t]) for t in contribution]
        return sorted(records, key=lambda r: (-abs(r.value), r.group))

    def _warn_mismatch(self, table: FrequencyTable) -> None:
        msg = (f"{self.lexicon.name} matched none of the {len(table.vocabulary)} terms; "
               f"check case and language normalisation")
        log.warning(msg)
        warnings.warn(msg, LexiconMismatchWarning, stacklevel=3)

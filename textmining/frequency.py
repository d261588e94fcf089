"""
================================================================================
FREQUENCY TABLE BUILDER
================================================================================
Aggregates token occurrence counts per document and corpus-wide.

A FrequencyTable maps (doc_id, term) -> n and carries the total number of
post-filter tokens of every document:

    sum_{term} n(doc, term) == total(doc)        for every doc

The table is built once per corpus snapshot and never mutated; tokenizing
again produces a new table. Rows are sorted by (doc_id, term), so an
unchanged corpus always yields an identical table whatever the iteration
order of the input mapping.

Documents with zero tokens produce no rows and a total of 0 but still
count towards n_documents, keeping idf denominators consistent with what
was actually processed.
================================================================================
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd
import scipy.sparse

from textmining.exceptions import EmptyDocument
from textmining.records import TermCount
from textmining.tokenizer import TokenSequence
from textmining.utils import get_logger, sorted_ids, timeit

log = get_logger(__name__)

DEFAULT_DOMAIN = ("word", 1)


@dataclass(frozen=True)
class DocumentTermMatrix:
    """Sparse document x term count matrix with its row/column labels."""
    matrix:   scipy.sparse.csr_matrix
    doc_ids:  Tuple[Hashable, ...]
    terms:    Tuple[str, ...]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.matrix.shape

    def nonempty_documents(self) -> int:
        """Number of rows with at least one count."""
        return int(np.count_nonzero(np.asarray(self.matrix.sum(axis=1)).ravel()))


class FrequencyTable:
    """
    Per-document term counts.

    Use FrequencyTable.build() rather than the constructor.

    Parameters
    ----------
    rows : tuple of TermCount, sorted by (doc_id, term)
    totals : dict doc_id -> total tokens, in table document order
    kind, arity : term domain (see tokenizer.TokenSequence)
    """

    def __init__(
        self,
        rows: Tuple[TermCount, ...],
        totals: Dict[Hashable, int],
        kind: str = "word",
        arity: int = 1,
    ):
        self._rows = tuple(rows)
        self._totals = dict(totals)
        self.kind = kind
        self.arity = arity
        self._index: Dict[Hashable, Dict[str, int]] = {d: {} for d in self._totals}
        for row in self._rows:
            self._index[row.doc_id][row.term] = row.n

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    @timeit
    def build(
        cls,
        corpus: Mapping[Hashable, Iterable[str]],
        kind: Optional[str] = None,
        arity: Optional[int] = None,
    ) -> "FrequencyTable":
        """
        Count terms per document.

        Parameters
        ----------
        corpus : mapping doc_id -> token sequence
            TokenSequence values carry their own term domain; plain
            iterables take ``kind``/``arity`` (default: words).
        kind, arity : optional domain override.

        Raises
        ------
        ValueError
            If the token sequences come from different term domains.
        """
        domains = {tokens.domain for tokens in corpus.values()
                   if isinstance(tokens, TokenSequence)}
        if kind is not None or arity is not None:
            domain = (kind or DEFAULT_DOMAIN[0],
                      arity if arity is not None else DEFAULT_DOMAIN[1])
            domains.discard(domain)
            if domains:
                raise ValueError(f"token domains {sorted(domains)} conflict "
                                 f"with requested domain {domain}")
        elif len(domains) > 1:
            raise ValueError(f"cannot mix term domains in one table: {sorted(domains)}")
        else:
            domain = domains.pop() if domains else DEFAULT_DOMAIN

        rows: List[TermCount] = []
        totals: Dict[Hashable, int] = {}
        for doc_id in sorted_ids(corpus):
            counts = Counter(corpus[doc_id])
            totals[doc_id] = sum(counts.values())
            rows.extend(TermCount(doc_id, term, n) for term, n in sorted(counts.items()))

        empty = [d for d, t in totals.items() if t == 0]
        if empty:
            log.warning("%d of %d documents have no terms after filtering",
                        len(empty), len(totals))
        log.debug("Built frequency table: %d documents, %d rows, %d terms",
                  len(totals), len(rows), len({r.term for r in rows}))
        return cls(tuple(rows), totals, kind=domain[0], arity=domain[1])

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        doc_col: str = "doc_id",
        term_col: str = "term",
        n_col: str = "n",
        totals: Optional[Mapping[Hashable, int]] = None,
        kind: str = "word",
        arity: int = 1,
    ) -> "FrequencyTable":
        """
        Rebuild a table from long-form (doc, term, n) rows.

        ``totals`` restores empty documents; by default totals are the
        per-document sums of ``n``.
        """
        counts: Dict[Hashable, Dict[str, int]] = {}
        for doc_id, term, n in zip(df[doc_col], df[term_col], df[n_col]):
            if n <= 0:
                continue
            doc = counts.setdefault(doc_id, {})
            doc[term] = doc.get(term, 0) + int(n)
        if totals is not None:
            for doc_id in totals:
                counts.setdefault(doc_id, {})

        rows: List[TermCount] = []
        out_totals: Dict[Hashable, int] = {}
        for doc_id in sorted_ids(counts):
            terms = counts[doc_id]
            out_totals[doc_id] = sum(terms.values())
            if totals is not None and totals.get(doc_id, out_totals[doc_id]) != out_totals[doc_id]:
                raise ValueError(f"total for {doc_id!r} ({totals[doc_id]}) does not "
                                 f"match its counts ({out_totals[doc_id]})")
            rows.extend(TermCount(doc_id, t, terms[t]) for t in sorted(terms))
        return cls(tuple(rows), out_totals, kind=kind, arity=arity)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def rows(self) -> Tuple[TermCount, ...]:
        return self._rows

    @property
    def totals(self) -> Dict[Hashable, int]:
        return dict(self._totals)

    @property
    def doc_ids(self) -> Tuple[Hashable, ...]:
        return tuple(self._totals)

    @property
    def n_documents(self) -> int:
        return len(self._totals)

    @property
    def vocabulary(self) -> Tuple[str, ...]:
        return tuple(sorted({row.term for row in self._rows}))

    @property
    def domain(self) -> Tuple[str, int]:
        return self.kind, self.arity

    def total(self, doc_id: Hashable) -> int:
        return self._totals[doc_id]

    def terms(self, doc_id: Hashable) -> Dict[str, int]:
        """Counts of every term of one document."""
        return dict(self._index[doc_id])

    def count(self, doc_id: Hashable, term: str) -> int:
        return self._index[doc_id].get(term, 0)

    def term_frequencies(self, doc_id: Hashable) -> Dict[str, float]:
        """
        tf = n / total for every term of one document.

        Raises
        ------
        EmptyDocument
            If the document has zero terms after filtering.
        """
        total = self._totals[doc_id]
        if total == 0:
            raise EmptyDocument(doc_id)
        return {term: n / total for term, n in self._index[doc_id].items()}

    def document_frequency(self) -> Dict[str, int]:
        """Number of documents containing each term."""
        df = Counter(row.term for row in self._rows)
        return dict(sorted(df.items()))

    def corpus_counts(self) -> List[Tuple[str, int]]:
        """Corpus-wide counts, by count (descending) then term."""
        counts = Counter()
        for row in self._rows:
            counts[row.term] += row.n
        return sorted(counts.items(), key=lambda x: (-x[1], x[0]))

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def to_frame(self) -> pd.DataFrame:
        """Long-form DataFrame with columns doc_id, term, n, total."""
        df = pd.DataFrame(
            [(r.doc_id, r.term, r.n) for r in self._rows],
            columns=["doc_id", "term", "n"],
        )
        df["total"] = df["doc_id"].map(self._totals).astype("int64")
        return df

    def to_dtm(self) -> DocumentTermMatrix:
        """Sparse document x term count matrix (CSR)."""
        terms = self.vocabulary
        col = {t: j for j, t in enumerate(terms)}
        row = {d: i for i, d in enumerate(self._totals)}
        data = np.fromiter((r.n for r in self._rows), dtype=np.int64, count=len(self._rows))
        rows = np.fromiter((row[r.doc_id] for r in self._rows), dtype=np.int64,
                           count=len(self._rows))
        cols = np.fromiter((col[r.term] for r in self._rows), dtype=np.int64,
                           count=len(self._rows))
        matrix = scipy.sparse.csr_matrix(
            (data, (rows, cols)), shape=(len(row), len(terms)), dtype=np.int64)
        return DocumentTermMatrix(matrix, tuple(self._totals), terms)

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, FrequencyTable):
            return NotImplemented
        return (self._rows == other._rows
                and list(self._totals.items()) == list(other._totals.items())
                and self.domain == other.domain)

    def __hash__(self) -> int:
        return hash((self._rows, tuple(self._totals.items()), self.domain))

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return (f"FrequencyTable(documents={self.n_documents}, rows={len(self._rows)}, "
                f"kind={self.kind!r}, arity={self.arity})")


def build_frequency_table(corpus: Mapping[Hashable, Iterable[str]], **kwargs) -> FrequencyTable:
    """Module-level alias for FrequencyTable.build()."""
    return FrequencyTable.build(corpus, **kwargs)

"""
================================================================================
TF-IDF SCORER
================================================================================
Term frequency / inverse document frequency for every (document, term)
row of a FrequencyTable:

    tf(d, t)     = n(d, t) / total(d)
    idf(t)       = ln( N / df(t) )
    tf_idf(d, t) = tf(d, t) * idf(t)

N counts every processed document, empty ones included. A term present
in every document has idf == 0 exactly, and so tf_idf == 0 whatever its
count. That is not an error.

Degenerate rows: a document holding a single token (n == total == 1) has
tf == 1 and tf_idf == idf, so it can rank spuriously high. Such rows are
flagged; filter on total > threshold before reading top-ranked terms as
"important" (see top_terms(min_total=...)).
================================================================================
"""

from itertools import groupby
from typing import List, Sequence

import numpy as np
import pandas as pd

from textmining.frequency import FrequencyTable
from textmining.records import TfIdfRecord, records_to_frame, record_fields
from textmining.utils import get_logger

log = get_logger(__name__)


class TfIdfScorer:
    """Scores a FrequencyTable with natural-log idf."""

    def score(self, table: FrequencyTable) -> List[TfIdfRecord]:
        """
        Compute tf, idf and tf-idf for every row of ``table``.

        Returns
        -------
        list of TfIdfRecord in table row order (doc_id, term).
        """
        rows = table.rows
        if not rows:
            return []

        n_docs = table.n_documents
        doc_freq = table.document_frequency()
        totals = table.totals

        n = np.array([r.n for r in rows], dtype=np.float64)
        total = np.array([totals[r.doc_id] for r in rows], dtype=np.float64)
        df = np.array([doc_freq[r.term] for r in rows], dtype=np.float64)

        tf = n / total
        idf = np.log(n_docs / df)
        tf_idf = tf * idf

        records = [
            TfIdfRecord(
                doc_id=r.doc_id,
                term=r.term,
                n=r.n,
                total=totals[r.doc_id],
                tf=float(tf[i]),
                idf=float(idf[i]),
                tf_idf=float(tf_idf[i]),
                degenerate=(r.n == 1 and totals[r.doc_id] == 1),
            )
            for i, r in enumerate(rows)
        ]

        n_degenerate = sum(rec.degenerate for rec in records)
        if n_degenerate:
            log.warning("%d single-token documents: their tf-idf equals idf and "
                        "may rank spuriously high", n_degenerate)
        log.debug("Scored %d rows over %d documents", len(records), n_docs)
        return records


def score_tf_idf(table: FrequencyTable) -> List[TfIdfRecord]:
    """Module-level shortcut for TfIdfScorer().score()."""
    return TfIdfScorer().score(table)


def top_terms(
    records: Sequence[TfIdfRecord],
    k: int = 10,
    min_total: int = 0,
    per_document: bool = True,
) -> List[TfIdfRecord]:
    """
    Highest tf-idf rows, ties broken by term.

    Parameters
    ----------
    records : output of TfIdfScorer.score()
    k : rows kept (per document when per_document is True)
    min_total : keep only documents with total > min_total
    per_document : rank within each document rather than corpus-wide
    """
    kept = [r for r in records if r.total > min_total]
    ordered = sorted(kept, key=lambda r: (-r.tf_idf, r.term))
    if not per_document:
        return ordered[:k]

    doc_order = {}
    for r in records:
        doc_order.setdefault(r.doc_id, len(doc_order))
    by_doc = sorted(ordered, key=lambda r: doc_order[r.doc_id])  # stable
    out: List[TfIdfRecord] = []
    for _, group in groupby(by_doc, key=lambda r: r.doc_id):
        out.extend(list(group)[:k])
    return out


def tf_idf_frame(records: Sequence[TfIdfRecord]) -> pd.DataFrame:
    """Long DataFrame for renderers; typed columns even when empty."""
    if not records:
        return pd.DataFrame(columns=record_fields(TfIdfRecord))
    return records_to_frame(records)

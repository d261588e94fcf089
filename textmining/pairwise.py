"""
================================================================================
PAIRWISE STATISTICS ENGINE
================================================================================
Co-occurrence counts and correlations between terms across groups.

The grouping is whatever the caller used as document id when building the
table: a document, or a derived section such as line_number // section_size
(see corpus.section_corpus). Each term becomes a binary presence vector
x_t over the N groups.

Pair count:
    n(a, b) = number of groups where both a and b occur at least once

Phi coefficient (Pearson correlation of two binary vectors):

                 N * n11 - n1. * n.1
    phi = -----------------------------------------
          sqrt( n1. (N - n1.) * n.1 (N - n.1) )

where n1. and n.1 are the group-presence counts of a and b and n11 their
co-occurrence count. Terms present in fewer than min_occurrences groups
are pruned BEFORE the O(V^2) pass; without pruning the pass is not
tractable on real corpora. Terms present in every group have zero variance
and no defined correlation; their pairs are omitted.

Pairs are stored once with term_a < term_b unless both directions are
requested. Output is sorted by statistic (descending), ties broken by
(term_a, term_b).
================================================================================
"""

from typing import List, Optional, Sequence, Union

import numpy as np
import scipy.sparse

from textmining.exceptions import UnknownTerm
from textmining.frequency import FrequencyTable
from textmining.records import PairCount, PairCorrelation
from textmining.utils import get_logger, timeit

log = get_logger(__name__)

PairRecord = Union[PairCount, PairCorrelation]


def _presence(table: FrequencyTable):
    """Binary groups x terms presence matrix and its term labels."""
    dtm = table.to_dtm()
    presence = (dtm.matrix > 0).astype(np.int64).tocsc()
    return presence, dtm.terms


def _statistic(record: PairRecord) -> float:
    return record.n if isinstance(record, PairCount) else record.correlation


def top_pairs(records: Sequence[PairRecord], k: Optional[int] = None) -> List[PairRecord]:
    """Sort by statistic descending, ties by (term_a, term_b); keep k."""
    ordered = sorted(records, key=lambda r: (-_statistic(r), r.term_a, r.term_b))
    return ordered if k is None else ordered[:k]


def pairs_for(records: Sequence[PairRecord], term: str) -> List[PairRecord]:
    """Pairs involving ``term``; empty for a term never observed."""
    return [r for r in records if term in (r.term_a, r.term_b)]


@timeit
def count_pairs(table_by_group: FrequencyTable,
                both_directions: bool = False) -> List[PairCount]:
    """
    Count the groups in which each pair of terms co-occurs.

    Parameters
    ----------
    table_by_group : FrequencyTable keyed by group id
    both_directions : also emit (b, a) for every (a, b)

    Returns
    -------
    list of PairCount with n >= 1, sorted by n desc then (term_a, term_b).
    """
    presence, terms = _presence(table_by_group)
    if len(terms) < 2:
        return []

    co = scipy.sparse.triu(presence.T @ presence, k=1).tocoo()
    records = []
    for i, j, n in zip(co.row, co.col, co.data):
        if n <= 0:
            continue
        records.append(PairCount(terms[i], terms[j], int(n)))
        if both_directions:
            records.append(PairCount(terms[j], terms[i], int(n)))

    log.debug("Counted %d term pairs over %d groups", len(records),
              table_by_group.n_documents)
    return top_pairs(records)


def _phi(n_groups: int, co, count_a, count_b):
    numerator = np.asarray(n_groups * co - count_a * count_b, dtype=np.float64)
    denominator = np.sqrt(count_a * (n_groups - count_a) * count_b * (n_groups - count_b))
    with np.errstate(divide="ignore", invalid="ignore"):
        phi = numerator / denominator
    return np.clip(phi, -1.0, 1.0)


@timeit
def correlate_pairs(
    table_by_group: FrequencyTable,
    min_occurrences: int = 1,
    both_directions: bool = False,
) -> List[PairCorrelation]:
    """
    Phi correlation of every pair of sufficiently frequent terms.

    Parameters
    ----------
    table_by_group : FrequencyTable keyed by group id
    min_occurrences : minimum number of groups a term must appear in
    both_directions : also emit (b, a) for every (a, b)

    Returns
    -------
    list of PairCorrelation sorted by correlation desc then (term_a, term_b).
    """
    presence, terms = _presence(table_by_group)
    n_groups = table_by_group.n_documents
    counts = np.asarray(presence.sum(axis=0)).ravel().astype(np.float64)

    keep = np.flatnonzero(counts >= min_occurrences)
    log.debug("Pruned %d of %d terms below %d group occurrences",
              len(terms) - len(keep), len(terms), min_occurrences)
    if len(keep) < 2:
        return []

    kept = presence[:, keep]
    co = np.asarray((kept.T @ kept).todense(), dtype=np.float64)
    c = counts[keep]
    phi = _phi(n_groups, co, c[:, None], c[None, :])

    iu, ju = np.triu_indices(len(keep), k=1)
    values = phi[iu, ju]
    defined = np.isfinite(values)
    n_undefined = int((~defined).sum())
    if n_undefined:
        log.debug("Skipped %d pairs with undefined correlation", n_undefined)

    records = []
    for i, j, value in zip(iu[defined], ju[defined], values[defined]):
        a, b = terms[keep[i]], terms[keep[j]]
        records.append(PairCorrelation(a, b, float(value)))
        if both_directions:
            records.append(PairCorrelation(b, a, float(value)))
    return top_pairs(records)


def pair_correlation(
    table_by_group: FrequencyTable,
    term_a: str,
    term_b: str,
    require: bool = False,
) -> Optional[float]:
    """
    Phi correlation of one pair, identical whichever order it is asked in.

    Returns None when either term was never observed or the correlation is
    undefined (a term present in every group).

    Raises
    ------
    UnknownTerm
        If ``require`` is set and either term was never observed.
    """
    presence, terms = _presence(table_by_group)
    col = {t: j for j, t in enumerate(terms)}
    for term in (term_a, term_b):
        if term not in col:
            if require:
                raise UnknownTerm(term)
            return None

    xa = presence[:, col[term_a]]
    xb = presence[:, col[term_b]]
    co = float(xa.multiply(xb).sum())
    value = _phi(table_by_group.n_documents, co, float(xa.sum()), float(xb.sum()))
    return float(value) if np.isfinite(value) else None

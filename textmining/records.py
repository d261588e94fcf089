"""
records.py
----------
Typed output records for every pipeline stage, plus the hash-map join
used wherever two record sequences are combined by a shared field.

All records are frozen: tables are derived values and read-only after
construction. Renderers receive plain records (or a DataFrame built from
them via ``records_to_frame``) with the field names below.
"""

from dataclasses import dataclass, asdict, fields, is_dataclass
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Sequence, Union

import pandas as pd


@dataclass(frozen=True)
class TermCount:
    """Occurrences of one term in one document."""
    doc_id:      Hashable
    term:        str
    n:           int


@dataclass(frozen=True)
class TfIdfRecord:
    """tf = n / total, idf = ln(N / df), tf_idf = tf * idf."""
    doc_id:      Hashable
    term:        str
    n:           int
    total:       int
    tf:          float
    idf:         float
    tf_idf:      float
    degenerate:  bool = False      # n == total == 1


@dataclass(frozen=True)
class PairCount:
    """Number of groups in which both terms occur at least once."""
    term_a:      str
    term_b:      str
    n:           int


@dataclass(frozen=True)
class PairCorrelation:
    """Phi coefficient of the binary presence vectors of two terms."""
    term_a:      str
    term_b:      str
    correlation: float


@dataclass(frozen=True)
class BetaRecord:
    """P(term | topic)."""
    topic:       int
    term:        str
    beta:        float


@dataclass(frozen=True)
class GammaRecord:
    """P(topic | document)."""
    document:    Hashable
    topic:       int
    gamma:       float


@dataclass(frozen=True)
class TopicAssignment:
    """Most probable topic for the occurrences of a term in a document."""
    doc_id:      Hashable
    term:        str
    n:           int
    topic:       int


@dataclass(frozen=True)
class SentimentRecord:
    """Aggregated lexicon value for a document, group, or term."""
    group:       Hashable
    value:       float
    n_matched:   int


@dataclass(frozen=True)
class NegationRecord:
    """Contribution of a word preceded by a negation word."""
    negation:     str
    word:         str
    n:            int
    value:        float
    contribution: float


Record = Union[Mapping[str, Any], Any]


def record_to_dict(record: Record) -> Dict[str, Any]:
    """Return a plain dict view of a dataclass record or mapping."""
    if is_dataclass(record) and not isinstance(record, type):
        return asdict(record)
    if isinstance(record, Mapping):
        return dict(record)
    raise TypeError(f"not a record: {type(record).__name__}")


def records_to_frame(records: Iterable[Record]) -> pd.DataFrame:
    """
    Build a DataFrame from a sequence of records.

    An empty sequence of dataclass records is not typed, so the result is
    an empty frame without columns.
    """
    rows = [record_to_dict(r) for r in records]
    return pd.DataFrame(rows)


def record_fields(record_type) -> List[str]:
    """Field names of a record dataclass, in declaration order."""
    return [f.name for f in fields(record_type)]


def join_records(
    left: Sequence[Record],
    right: Sequence[Record],
    key: str,
    how: str = "inner",
) -> List[Dict[str, Any]]:
    """
    Hash join two record sequences on a declared field.

    Parameters
    ----------
    left, right : sequences of dataclass records or mappings.
    key         : field name present on both sides.
    how         : 'inner' -> only keys on both sides (sentiment joins)
                  'left'  -> every left row, right fields None when absent
                  'outer' -> every row of both sides (keyword/metadata joins)

    Returns
    -------
    list of merged dicts. Left rows keep their order; right-only rows of an
    outer join follow in right order. Where both sides share a non-key field,
    the left value wins and the right value is stored as ``<field>_right``.
    """
    if how not in ("inner", "left", "outer"):
        raise ValueError(f"unknown join mode: {how!r}")

    left_rows = [record_to_dict(r) for r in left]
    right_rows = [record_to_dict(r) for r in right]

    index: Dict[Any, List[Dict[str, Any]]] = {}
    for row in right_rows:
        index.setdefault(row[key], []).append(row)

    left_fields = set().union(*(r.keys() for r in left_rows)) if left_rows else set()
    right_fields = set().union(*(r.keys() for r in right_rows)) if right_rows else set()

    def merge(lrow: Dict[str, Any], rrow: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(lrow)
        for name, value in rrow.items():
            if name == key:
                continue
            if name in lrow:
                out[f"{name}_right"] = value
            else:
                out[name] = value
        return out

    empty_right = {name: None for name in right_fields if name != key}
    joined: List[Dict[str, Any]] = []
    matched_keys = set()
    for lrow in left_rows:
        matches = index.get(lrow[key])
        if matches:
            matched_keys.add(lrow[key])
            joined.extend(merge(lrow, rrow) for rrow in matches)
        elif how in ("left", "outer"):
            joined.append(merge(lrow, empty_right))

    if how == "outer":
        empty_left = {name: None for name in left_fields if name != key}
        for rrow in right_rows:
            if rrow[key] not in matched_keys:
                row = dict(empty_left)
                row.update(rrow)
                joined.append(row)

    return joined

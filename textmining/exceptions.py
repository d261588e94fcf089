"""
exceptions.py
-------------
Error kinds raised by the scoring pipeline.

All errors are local and recoverable by adjusting inputs. Lexicon
mismatches are a warning, not an exception: a join with zero matches is
syntactically valid.
"""

from typing import Any, Hashable


class TextMiningError(Exception):
    """Base class for all pipeline errors."""


class EmptyDocument(TextMiningError, ValueError):
    """Term frequency requested for a document with zero total terms."""

    def __init__(self, doc_id: Hashable):
        self.doc_id = doc_id
        super().__init__(f"document {doc_id!r} has no terms after filtering")


class InvalidTopicCount(TextMiningError, ValueError):
    """Topic count below 1 or above the number of non-empty documents."""

    def __init__(self, k: Any, n_nonempty: int):
        self.k = k
        self.n_nonempty = n_nonempty
        super().__init__(
            f"invalid topic count k={k!r}: need 1 <= k <= {n_nonempty} "
            f"(non-empty documents)"
        )


class UnknownTerm(TextMiningError, KeyError):
    """Lookup requested for a term never observed in the table."""

    def __init__(self, term: str):
        self.term = term
        super().__init__(term)

    def __str__(self) -> str:
        return f"term {self.term!r} was never observed"


class LexiconMismatchWarning(UserWarning):
    """Sentiment join matched no terms (e.g. case or language mismatch)."""

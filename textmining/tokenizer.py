"""
================================================================================
TOKENIZER: WORDS, N-GRAMS AND SENTENCES
================================================================================
Splits a document's raw lines into normalised tokens.

Modes:
    word      - word splitting + lowercasing; internal apostrophes kept
                ("don't"), optional stop-word removal by set membership
    ngram(n)  - sliding window of n consecutive words over the document,
                each emitted as ONE space-joined term ("not good").
                Downstream code splits on the space, see split_ngram().
    sentence  - NLTK Punkt sentence boundaries with default (untrained)
                English parameters. Lossy on unusual encodings and
                abbreviations; that is an accepted limitation.

Tokens must contain at least one letter; purely numeric or punctuation
tokens are dropped unless keep_non_alpha is set.

Word terms and n-gram terms are distinct typed domains: every result is a
TokenSequence tagged with its kind and arity, and downstream stages refuse
to compare across domains.
================================================================================
"""

import re
from collections.abc import Sequence
from typing import Dict, Hashable, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from nltk.util import ngrams
from nltk.tokenize.punkt import PunktSentenceTokenizer

from textmining.config import TokenizerConfig
from textmining.utils import get_logger

log = get_logger(__name__)

NGRAM_SEP = " "
MODES = ("word", "ngram", "sentence")

WORD_PATTERN = re.compile(r"[^\W_]+(?:'[^\W_]+)*")
# with keep_non_alpha, runs of punctuation become tokens too
WORD_OR_PUNCT_PATTERN = re.compile(r"[^\W_]+(?:'[^\W_]+)*|[^\w\s]+")
APOSTROPHES = re.compile(r"[’‘ʼ]")
WHITESPACE = re.compile(r"\s+")

Lines = Union[str, Iterable[str]]


def has_letter(token: str) -> bool:
    """The 'must contain a letter' predicate."""
    return any(ch.isalpha() for ch in token)


def split_ngram(term: str) -> Tuple[str, ...]:
    """Inverse of the n-gram encoding: 'not good' -> ('not', 'good')."""
    return tuple(term.split(NGRAM_SEP))


def sections(lines: Lines, section_size: int) -> Dict[int, List[str]]:
    """
    Chunk a line sequence into sections of ``section_size`` lines.

    Section id of line i (0-based) is ``i // section_size``.
    """
    if section_size < 1:
        raise ValueError(f"section_size must be >= 1, got {section_size}")
    if isinstance(lines, str):
        lines = lines.splitlines()
    out: Dict[int, List[str]] = {}
    for i, line in enumerate(lines):
        out.setdefault(i // section_size, []).append(line)
    return out


class TokenSequence(Sequence):
    """
    Immutable, re-iterable token sequence tagged with its term domain.

    Parameters
    ----------
    tokens : iterable of str
    kind   : 'word', 'ngram' or 'sentence'
    arity  : words per term (1 for words, n for n-grams, 0 for sentences)
    """

    __slots__ = ("_tokens", "kind", "arity")

    def __init__(self, tokens: Iterable[str], kind: str = "word", arity: int = 1):
        if kind not in MODES:
            raise ValueError(f"unknown token kind: {kind!r}")
        self._tokens = tuple(tokens)
        self.kind = kind
        self.arity = arity

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            return TokenSequence(self._tokens[idx], self.kind, self.arity)
        return self._tokens[idx]

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __eq__(self, other) -> bool:
        if isinstance(other, TokenSequence):
            return (self._tokens, self.kind, self.arity) == \
                (other._tokens, other.kind, other.arity)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._tokens, self.kind, self.arity))

    @property
    def domain(self) -> Tuple[str, int]:
        return self.kind, self.arity

    def __repr__(self) -> str:
        head = ", ".join(repr(t) for t in self._tokens[:5])
        more = ", ..." if len(self._tokens) > 5 else ""
        return f"TokenSequence([{head}{more}], kind={self.kind!r}, arity={self.arity})"


class Tokenizer:
    """
    Tokenizer with an injected stop-word set.

    Parameters
    ----------
    config : TokenizerConfig, optional
        Normalisation rules; defaults to TokenizerConfig().
    stop_words : iterable of str, optional
        Words removed in word mode (and from n-grams when
        config.ngram_stop_words is set). Compared after lowercasing.
    """

    def __init__(
        self,
        config: Optional[TokenizerConfig] = None,
        stop_words: Optional[Iterable[str]] = None,
    ):
        self.config = config or TokenizerConfig()
        self.stop_words = frozenset(
            self._normalise(w) for w in (stop_words or ())
        )
        self._sentence_splitter = PunktSentenceTokenizer()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tokenize(self, lines: Lines, mode: str = "word",
                 n: Optional[int] = None) -> TokenSequence:
        """
        Tokenize one document.

        Parameters
        ----------
        lines : str or iterable of str
            The document's raw lines. A bare string is one line.
        mode : 'word', 'ngram' or 'sentence'
        n : int
            Window size for mode='ngram' (required there, ignored otherwise).

        Returns
        -------
        TokenSequence
        """
        if isinstance(lines, str):
            lines = [lines]
        else:
            lines = list(lines)

        if mode == "word":
            return TokenSequence(self._words(lines, drop_stop_words=True), "word", 1)
        if mode == "ngram":
            if n is None or n < 1:
                raise ValueError(f"ngram mode requires n >= 1, got {n!r}")
            if n == 1:
                return TokenSequence(self._words(lines, drop_stop_words=True), "word", 1)
            return TokenSequence(self._ngrams(lines, n), "ngram", n)
        if mode == "sentence":
            return TokenSequence(self._sentences(lines), "sentence", 0)
        raise ValueError(f"unknown tokenize mode: {mode!r}; expected one of {MODES}")

    def tokenize_corpus(
        self,
        corpus_lines: Mapping[Hashable, Lines],
        mode: str = "word",
        n: Optional[int] = None,
    ) -> Dict[Hashable, TokenSequence]:
        """Tokenize every document of a {doc_id: lines} mapping."""
        corpus = {doc_id: self.tokenize(lines, mode=mode, n=n)
                  for doc_id, lines in corpus_lines.items()}
        log.debug("Tokenized %d documents in %s mode (%d tokens)",
                  len(corpus), mode, sum(len(t) for t in corpus.values()))
        return corpus

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _normalise(self, token: str) -> str:
        token = APOSTROPHES.sub("'", token)
        return token.lower() if self.config.lowercase else token

    def _words(self, lines: List[str], drop_stop_words: bool) -> List[str]:
        pattern = WORD_OR_PUNCT_PATTERN if self.config.keep_non_alpha else WORD_PATTERN
        words = []
        for line in lines:
            for match in pattern.finditer(APOSTROPHES.sub("'", line)):
                token = self._normalise(match.group())
                if not self.config.keep_non_alpha and not has_letter(token):
                    continue
                if drop_stop_words and token in self.stop_words:
                    continue
                words.append(token)
        return words

    def _ngrams(self, lines: List[str], n: int) -> List[str]:
        words = self._words(lines, drop_stop_words=False)
        grams = []
        for gram in ngrams(words, n):
            if self.config.ngram_stop_words and any(w in self.stop_words for w in gram):
                continue
            grams.append(NGRAM_SEP.join(gram))
        return grams

    def _sentences(self, lines: List[str]) -> List[str]:
        text = WHITESPACE.sub(" ", " ".join(lines)).strip()
        if not text:
            return []
        out = []
        for sent in self._sentence_splitter.tokenize(text):
            sent = self._normalise(sent.strip())
            if sent and (self.config.keep_non_alpha or has_letter(sent)):
                out.append(sent)
        return out

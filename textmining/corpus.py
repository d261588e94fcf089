"""
corpus.py
---------
Loading helpers for the pipeline's boundary inputs: corpora (one
document per text file), stop-word lists and sentiment lexicons, plus the
section regrouping used by the pairwise statistics.

The scoring core never calls these itself; they run once, before it.
"""

from pathlib import Path
from typing import Dict, FrozenSet, Hashable, List, Mapping, Optional, Tuple, Union

import pandas as pd

from textmining.models.sentiment import Lexicon
from textmining.tokenizer import sections
from textmining.utils import get_logger

log = get_logger(__name__)

PathLike = Union[str, Path]


# Short passages adapted from Austen, Pride and Prejudice (public domain),
# used by the demo and as a realistic fixture.
SAMPLE_CORPUS: Dict[str, List[str]] = {
    "pride_ch1": [
        "It is a truth universally acknowledged, that a single man in possession",
        "of a good fortune, must be in want of a wife.",
        "However little known the feelings or views of such a man may be on his",
        "first entering a neighbourhood, this truth is so well fixed in the minds",
        "of the surrounding families, that he is considered the rightful property",
        "of some one or other of their daughters.",
        "My dear Mr. Bennet, said his lady to him one day, have you heard that",
        "Netherfield Park is let at last? Mr. Bennet replied that he had not.",
    ],
    "pride_ch3": [
        "Not all that Mrs. Bennet, however, with the assistance of her five",
        "daughters, could ask on the subject, was sufficient to draw from her",
        "husband any satisfactory description of Mr. Bingley.",
        "Mr. Darcy soon drew the attention of the room by his fine, tall person,",
        "handsome features, noble mien, and the report which was in general",
        "circulation within five minutes after his entrance, of his having ten",
        "thousand a year. He was the proudest, most disagreeable man in the world,",
        "and everybody hoped that he would never come there again.",
    ],
    "pride_ch6": [
        "Miss Lucas and Elizabeth walked together; the happiness of a good",
        "marriage is entirely a matter of chance, said Charlotte. It is not good",
        "to know too much of the defects of the person with whom you are to pass",
        "your life. Elizabeth laughed, and said it was not sound, and that she",
        "would never act in this way herself. Mr. Darcy listened with interest,",
        "and found the fine eyes of Elizabeth a source of very great pleasure.",
    ],
}

SAMPLE_STOP_WORDS: FrozenSet[str] = frozenset(
    "a an and any are as at be by could do for from had has have he her him "
    "his however i in is it its may me must my no not of on one or other said "
    "she so some such that the their there them this to too very was were "
    "which who whom with would you your".split()
)

SAMPLE_LEXICON: Dict[str, int] = {
    "good": 3, "great": 3, "happiness": 3, "pleasure": 3, "handsome": 3,
    "noble": 2, "fine": 2, "satisfactory": 2, "interest": 1, "hoped": 2,
    "laughed": 1, "dear": 2, "disagreeable": -2, "defects": -2, "want": 1,
}


def read_corpus(directory: PathLike, pattern: str = "*.txt",
                encoding: str = "utf-8") -> Dict[str, List[str]]:
    """
    Read every matching file of a directory as one document.

    Returns
    -------
    dict doc_id (file stem) -> list of lines without line endings.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise ValueError(f"directory not found: {directory!s}")
    corpus = {}
    for path in sorted(directory.glob(pattern)):
        with open(path, encoding=encoding) as inp:
            corpus[path.stem] = inp.read().splitlines()
    log.info("Read %d documents from %s", len(corpus), directory)
    return corpus


def load_stop_words(path: PathLike, encoding: str = "utf-8") -> FrozenSet[str]:
    """One word per line; blank lines and '#' comments ignored."""
    with open(path, encoding=encoding) as inp:
        words = [line.strip() for line in inp]
    return frozenset(w.lower() for w in words if w and not w.startswith("#"))


def load_lexicon(path: PathLike, term_col: str = "word", value_col: str = "value",
                 sep: str = ",", name: Optional[str] = None) -> Lexicon:
    """Read a sentiment lexicon from a delimited file (CSV by default)."""
    df = pd.read_csv(path, sep=sep, usecols=[term_col, value_col])
    return Lexicon.from_frame(df.dropna(), term_col=term_col, value_col=value_col,
                              name=name or Path(path).stem)


def section_corpus(
    corpus_lines: Mapping[Hashable, List[str]],
    section_size: int,
) -> Dict[Tuple[Hashable, int], List[str]]:
    """
    Regroup documents into sections of ``section_size`` lines.

    Keys are (doc_id, line_number // section_size); tokenize the result
    and build a FrequencyTable from it to get a table keyed by section.
    """
    out = {}
    for doc_id, lines in corpus_lines.items():
        for section, chunk in sections(lines, section_size).items():
            out[(doc_id, section)] = chunk
    return out

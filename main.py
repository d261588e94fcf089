"""
Text-Mining Scoring Pipeline - Main Entry Point
================================================
Demonstrates the complete scoring pipeline on a small built-in corpus:
tokenization, frequency tables, tf-idf, pairwise term statistics,
LDA topic modeling, and lexicon sentiment.

Pass a directory of .txt files to run on your own corpus:
    python main.py path/to/texts
"""

import sys
import warnings

from textmining.config import CONFIG
from textmining.corpus import (SAMPLE_CORPUS, SAMPLE_LEXICON, SAMPLE_STOP_WORDS,
                               read_corpus, section_corpus)
from textmining.exceptions import InvalidTopicCount, LexiconMismatchWarning
from textmining.frequency import FrequencyTable
from textmining.models import Lexicon, SentimentScorer, TopicModel
from textmining.pairwise import correlate_pairs, count_pairs, top_pairs
from textmining.tfidf import TfIdfScorer, top_terms
from textmining.tokenizer import Tokenizer
from textmining.utils import setup_logging, set_random_seed


def main(argv=None):
    """Run the complete text-to-scores pipeline."""
    argv = sys.argv[1:] if argv is None else argv
    print("=" * 70)
    print("TEXT-MINING SCORING PIPELINE")
    print("=" * 70)

    setup_logging(CONFIG.logging.level, CONFIG.logging.log_dir or None)
    set_random_seed(CONFIG.topics.seed)
    warnings.simplefilter("always", LexiconMismatchWarning)

    # --- Step 1: Corpus ---
    print("\n[1/6] Loading corpus...")
    corpus_lines = read_corpus(argv[0]) if argv else SAMPLE_CORPUS
    print(f"  Documents: {len(corpus_lines)}")

    # --- Step 2: Tokens & frequencies ---
    print("\n[2/6] Tokenizing and counting terms...")
    tokenizer = Tokenizer(CONFIG.tokenizer, stop_words=SAMPLE_STOP_WORDS)
    words = tokenizer.tokenize_corpus(corpus_lines, mode="word")
    table = FrequencyTable.build(words)
    print(f"  {table.n_documents} documents | {len(table.vocabulary)} terms | "
          f"{sum(table.totals.values())} tokens")
    for term, n in table.corpus_counts()[:5]:
        print(f"    {term:<20s} {n}")
    ngram_n = CONFIG.tokenizer.ngram_n
    grams = FrequencyTable.build(
        tokenizer.tokenize_corpus(corpus_lines, mode="ngram", n=ngram_n))
    print(f"  Most frequent {ngram_n}-grams:")
    for term, n in grams.corpus_counts()[:3]:
        print(f"    {term:<20s} {n}")

    # --- Step 3: TF-IDF ---
    print("\n[3/6] Scoring tf-idf...")
    records = TfIdfScorer().score(table)
    for rec in top_terms(records, k=3, min_total=1):
        print(f"    {rec.doc_id!s:<12s} {rec.term:<16s} {rec.tf_idf:.4f}")

    # --- Step 4: Pairwise statistics ---
    print("\n[4/6] Pairwise statistics by section...")
    # sample chapters are only a few lines long
    section_size = CONFIG.pairwise.section_size if argv else 2
    min_occurrences = CONFIG.pairwise.min_occurrences if argv else 2
    by_section = FrequencyTable.build(
        tokenizer.tokenize_corpus(section_corpus(corpus_lines, section_size)))
    counts = count_pairs(by_section)
    correlations = correlate_pairs(by_section, min_occurrences=min_occurrences)
    print(f"  {by_section.n_documents} sections | {len(counts)} co-occurring pairs | "
          f"{len(correlations)} correlated pairs")
    for rec in top_pairs(correlations, 5):
        print(f"    {rec.term_a:<14s} {rec.term_b:<14s} {rec.correlation:+.3f}")

    # --- Step 5: Topic model ---
    print("\n[5/6] Fitting topic model...")
    try:
        model = TopicModel.fit(table, k=CONFIG.topics.k, config=CONFIG.topics)
    except InvalidTopicCount as exc:
        print(f"  Skipped: {exc}")
    else:
        for topic in range(1, model.k + 1):
            terms = [b.term for b in model.top_terms(5) if b.topic == topic]
            print(f"    topic {topic}: {', '.join(terms)}")
        labels = {doc_id: doc_id for doc_id in table.doc_ids}
        print(model.confusion(model.assign(table), labels))

    # --- Step 6: Sentiment ---
    print("\n[6/6] Lexicon sentiment...")
    scorer = SentimentScorer(Lexicon(SAMPLE_LEXICON, name="sample"), CONFIG.sentiment)
    for rec in scorer.score(table, mode="mean"):
        print(f"    {rec.group!s:<12s} mean={rec.value:+.3f} (n={rec.n_matched})")
    bigrams = FrequencyTable.build(
        tokenizer.tokenize_corpus(corpus_lines, mode="ngram", n=2))
    for rec in scorer.negation_contributions(bigrams):
        print(f"    '{rec.negation} {rec.word}' contribution {rec.contribution:+.1f}")

    print("\n" + "=" * 70)
    print("PIPELINE COMPLETE")
    print("=" * 70)


if __name__ == "__main__":
    main()

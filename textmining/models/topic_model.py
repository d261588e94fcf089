"""
================================================================================
LDA TOPIC MODEL WRAPPER
================================================================================
Fits a Latent Dirichlet Allocation model over a document-term matrix and
exposes its two distributions in long form:

    beta(topic, term)      = P(term | topic)        rows sum to 1 per topic
    gamma(document, topic) = P(topic | document)    rows sum to 1 per document

Inference is delegated to a pluggable backend (LDABackend). The default,
SklearnLDA, runs scikit-learn's variational-Bayes LatentDirichletAllocation;
any Gibbs or variational implementation returning (beta, gamma) arrays can
be substituted.

The wrapper itself:
    1. validates 1 <= k <= number of non-empty documents (InvalidTopicCount)
    2. fixes the random seed so fits are reproducible
    3. renormalises and exposes beta/gamma tables
    4. assigns each (document, term) occurrence to its most probable topic,

           topic(d, w) = argmax_t gamma[d, t] * beta[t, w]

       ties going to the lowest topic, for confusion-matrix evaluation
       against known document labels.

Topics are numbered from 1 in every output record.
================================================================================
"""

from abc import ABC, abstractmethod
from typing import Dict, Hashable, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd
from sklearn.decomposition import LatentDirichletAllocation

from textmining.config import TopicModelConfig
from textmining.exceptions import InvalidTopicCount
from textmining.frequency import DocumentTermMatrix, FrequencyTable
from textmining.records import (BetaRecord, GammaRecord, TopicAssignment,
                                records_to_frame)
from textmining.utils import get_logger, timeit

log = get_logger(__name__)


class LDABackend(ABC):
    """Inference capability: fit(dtm, k, seed) -> (beta[k, V], gamma[D, k])."""

    @abstractmethod
    def fit(self, dtm: DocumentTermMatrix, k: int,
            seed: Optional[int]) -> Tuple[np.ndarray, np.ndarray]:
        ...

    def perplexity(self, dtm: DocumentTermMatrix) -> Optional[float]:
        """Held-out perplexity of the last fit; None when the backend has no such measure."""
        return None


class SklearnLDA(LDABackend):
    """
    scikit-learn LatentDirichletAllocation backend (batch variational Bayes).

    Parameters
    ----------
    config : TopicModelConfig, optional
        max_iter and Dirichlet priors; None priors use sklearn's 1/k.
    """

    def __init__(self, config: Optional[TopicModelConfig] = None):
        self.config = config or TopicModelConfig()
        self.model_: Optional[LatentDirichletAllocation] = None

    def fit(self, dtm, k, seed):
        self.model_ = LatentDirichletAllocation(
            n_components=k,
            learning_method="batch",
            max_iter=self.config.max_iter,
            doc_topic_prior=self.config.doc_topic_prior,
            topic_word_prior=self.config.topic_word_prior,
            random_state=seed,
        ).fit(dtm.matrix)
        components = self.model_.components_
        beta = components / components.sum(axis=1, keepdims=True)
        gamma = self.model_.transform(dtm.matrix)
        return beta, gamma

    def perplexity(self, dtm: DocumentTermMatrix) -> float:
        if self.model_ is None:
            raise RuntimeError("backend has not been fitted")
        return float(self.model_.perplexity(dtm.matrix))


def _normalise_rows(matrix: np.ndarray) -> np.ndarray:
    matrix = np.asarray(matrix, dtype=np.float64)
    sums = matrix.sum(axis=1, keepdims=True)
    if np.any(sums <= 0):
        raise ValueError("topic model backend returned an all-zero distribution row")
    return matrix / sums


class TopicModel:
    """
    Fitted topic model. Build it with TopicModel.fit().

    Attributes
    ----------
    k : number of topics
    seed : random seed used for the fit
    terms : vocabulary, column order of beta
    doc_ids : documents, row order of gamma
    """

    def __init__(self, beta: np.ndarray, gamma: np.ndarray,
                 terms: Tuple[str, ...], doc_ids: Tuple[Hashable, ...],
                 seed: Optional[int], backend: LDABackend):
        self._beta = _normalise_rows(beta)
        self._gamma = _normalise_rows(gamma)
        self.terms = tuple(terms)
        self.doc_ids = tuple(doc_ids)
        self.k = self._beta.shape[0]
        self.seed = seed
        self.backend = backend
        self._term_index = {t: j for j, t in enumerate(self.terms)}
        self._doc_index = {d: i for i, d in enumerate(self.doc_ids)}

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------

    @classmethod
    @timeit
    def fit(
        cls,
        dtm: Union[DocumentTermMatrix, FrequencyTable],
        k: int,
        seed: Optional[int] = None,
        backend: Optional[LDABackend] = None,
        config: Optional[TopicModelConfig] = None,
    ) -> "TopicModel":
        """
        Fit k topics.

        Parameters
        ----------
        dtm : DocumentTermMatrix or FrequencyTable
        k : number of topics, 1 <= k <= non-empty documents
        seed : random seed (defaults to config.seed)
        backend : inference backend (defaults to SklearnLDA(config))
        config : TopicModelConfig

        Raises
        ------
        InvalidTopicCount
        """
        config = config or TopicModelConfig()
        if isinstance(dtm, FrequencyTable):
            dtm = dtm.to_dtm()

        nonempty = dtm.nonempty_documents()
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)) \
                or k < 1 or k > nonempty:
            raise InvalidTopicCount(k, nonempty)

        seed = config.seed if seed is None else seed
        backend = backend or SklearnLDA(config)
        log.info("Fitting LDA: k=%d, %d documents x %d terms, seed=%s",
                 k, dtm.shape[0], dtm.shape[1], seed)
        beta, gamma = backend.fit(dtm, int(k), seed)

        beta = np.asarray(beta)
        gamma = np.asarray(gamma)
        if beta.shape != (k, dtm.shape[1]) or gamma.shape != (dtm.shape[0], k):
            raise ValueError(f"backend returned beta {beta.shape} / gamma {gamma.shape}, "
                             f"expected {(k, dtm.shape[1])} / {(dtm.shape[0], k)}")
        return cls(beta, gamma, dtm.terms, dtm.doc_ids, seed, backend)

    # ------------------------------------------------------------------
    # Distributions
    # ------------------------------------------------------------------

    @property
    def beta_matrix(self) -> np.ndarray:
        return self._beta.copy()

    @property
    def gamma_matrix(self) -> np.ndarray:
        return self._gamma.copy()

    def beta(self) -> List[BetaRecord]:
        """Per-topic term probabilities, ordered by topic then term."""
        return [BetaRecord(t + 1, term, float(self._beta[t, j]))
                for t in range(self.k)
                for j, term in enumerate(self.terms)]

    def gamma(self) -> List[GammaRecord]:
        """Per-document topic probabilities, ordered by document then topic."""
        return [GammaRecord(doc, t + 1, float(self._gamma[i, t]))
                for i, doc in enumerate(self.doc_ids)
                for t in range(self.k)]

    def beta_frame(self) -> pd.DataFrame:
        return records_to_frame(self.beta())

    def gamma_frame(self) -> pd.DataFrame:
        return records_to_frame(self.gamma())

    def top_terms(self, n: int = 10) -> List[BetaRecord]:
        """The n most probable terms of each topic (beta desc, term asc)."""
        out = []
        for t in range(self.k):
            ranked = sorted(range(len(self.terms)),
                            key=lambda j: (-self._beta[t, j], self.terms[j]))
            out.extend(BetaRecord(t + 1, self.terms[j], float(self._beta[t, j]))
                       for j in ranked[:n])
        return out

    def document_topics(self) -> Dict[Hashable, int]:
        """Most probable topic of each document (lowest topic on ties)."""
        best = np.argmax(self._gamma, axis=1)
        return {doc: int(best[i]) + 1 for i, doc in enumerate(self.doc_ids)}

    def perplexity(self, dtm: Optional[DocumentTermMatrix] = None) -> Optional[float]:
        """Backend perplexity; None when the backend does not provide one."""
        if dtm is None:
            raise ValueError("perplexity needs the document-term matrix")
        if isinstance(dtm, FrequencyTable):
            dtm = dtm.to_dtm()
        return self.backend.perplexity(dtm)

    # ------------------------------------------------------------------
    # Assignment & evaluation
    # ------------------------------------------------------------------

    def assign(self, table: FrequencyTable) -> List[TopicAssignment]:
        """
        Assign every (document, term) row of ``table`` to a topic.

        The topic maximises gamma[d, t] * beta[t, w], the document's mixture
        weighted by the word's topic probability, so words of one document
        can land in different topics; document_topics() gives the bare
        argmax of gamma.

        Terms outside the fitted vocabulary are skipped.

        Raises
        ------
        KeyError
            If the table holds a document the model was not fitted on.
        """
        out = []
        skipped = 0
        for row in table.rows:
            j = self._term_index.get(row.term)
            if j is None:
                skipped += 1
                continue
            i = self._doc_index[row.doc_id]
            scores = self._gamma[i] * self._beta[:, j]
            out.append(TopicAssignment(row.doc_id, row.term, row.n,
                                       int(np.argmax(scores)) + 1))
        if skipped:
            log.debug("Skipped %d rows with terms outside the fitted vocabulary", skipped)
        return out

    @staticmethod
    def confusion(assignments: List[TopicAssignment],
                  labels: Mapping[Hashable, Hashable]) -> pd.DataFrame:
        """
        Token counts per (true label, assigned topic).

        Parameters
        ----------
        assignments : output of assign()
        labels : doc_id -> ground-truth label (e.g. book title)

        Returns
        -------
        DataFrame indexed by label with one integer column per topic.
        """
        if not assignments:
            return pd.DataFrame()
        df = records_to_frame(assignments)
        df["label"] = df["doc_id"].map(labels)
        missing = df["label"].isna()
        if missing.any():
            raise KeyError(f"no label for documents: {sorted(df.loc[missing, 'doc_id'].unique())}")
        return (df.pivot_table(index="label", columns="topic", values="n",
                               aggfunc="sum", fill_value=0)
                  .astype("int64"))

    def __repr__(self) -> str:
        return (f"TopicModel(k={self.k}, documents={len(self.doc_ids)}, "
                f"terms={len(self.terms)}, seed={self.seed})")

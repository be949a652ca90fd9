"""
Bonferroni and FDR evaluation of causal-locus p-values

Only the n causal loci are simulated. For FDR purposes the remaining N - n
tested loci are represented by p-values drawn uniformly from [0, 1), which
is their distribution under the null. The combined N-length vector is
adjusted once per replicate with Benjamini-Hochberg.
"""

import numpy as np

from ..utils.data_types import ConfigurationError, DetectionCounts
from ..utils.stats import bonferroni_correction, fdr_correction


def validate_thresholds(alpha: float, fdr_threshold: float) -> None:
    if not (0.0 < alpha <= 1.0):
        raise ConfigurationError("alpha", f"must lie in (0, 1], got {alpha}")
    if not (0.0 < fdr_threshold <= 1.0):
        raise ConfigurationError("fdr_threshold", f"must lie in (0, 1], got {fdr_threshold}")


def fill_null_pvalues(causal_pvalues: np.ndarray, n_total: int,
                      rng: np.random.Generator) -> np.ndarray:
    """Causal p-values followed by N - n uniform null p-values"""
    causal_pvalues = np.asarray(causal_pvalues, dtype=np.float64)
    n_null = int(n_total) - causal_pvalues.shape[0]
    if n_null < 0:
        raise ConfigurationError(
            "n_total", f"{causal_pvalues.shape[0]} causal p-values exceed {n_total} tested loci"
        )
    return np.concatenate([causal_pvalues, rng.random(n_null)])


def count_detections(combined_pvalues: np.ndarray, n_causal: int,
                     alpha: float, fdr_threshold: float) -> DetectionCounts:
    """Count detections in a full N-length p-value vector

    The first n_causal entries are the true loci. Bonferroni uses the
    threshold alpha / N; FDR hits are BH q-values strictly below
    fdr_threshold.
    """
    combined_pvalues = np.asarray(combined_pvalues, dtype=np.float64)
    n_total = combined_pvalues.shape[0]

    _, bonferroni_threshold = bonferroni_correction(combined_pvalues, alpha=alpha, n_tests=n_total)
    bonf_true = int(np.sum(combined_pvalues[:n_causal] < bonferroni_threshold))

    _, qvalues = fdr_correction(combined_pvalues, alpha=fdr_threshold)
    hits = qvalues < fdr_threshold
    fdr_detect = int(np.sum(hits))
    fdr_true = int(np.sum(hits[:n_causal]))

    return DetectionCounts(bonf_true=bonf_true, fdr_detect=fdr_detect, fdr_true=fdr_true)


def evaluate_detections(causal_pvalues: np.ndarray, n_total: int, alpha: float,
                        fdr_threshold: float, rng: np.random.Generator) -> DetectionCounts:
    """Bonferroni and FDR detection counts for one replicate

    Args:
        causal_pvalues: p-values of the n causal loci
        n_total: Number of tested loci (N)
        alpha: Family-wise error rate for Bonferroni
        fdr_threshold: q-value cutoff for FDR hits
        rng: Generator consumed for the null p-value fill

    Returns:
        DetectionCounts(bonf_true, fdr_detect, fdr_true)
    """
    validate_thresholds(alpha, fdr_threshold)
    causal_pvalues = np.asarray(causal_pvalues, dtype=np.float64)
    combined = fill_null_pvalues(causal_pvalues, n_total, rng)
    return count_detections(combined, causal_pvalues.shape[0], alpha, fdr_threshold)

"""
Statistical utilities for power simulation
"""

import numpy as np
from typing import Tuple


def bonferroni_correction(pvalues: np.ndarray, alpha: float = 0.05,
                          n_tests: int = None) -> Tuple[np.ndarray, float]:
    """Apply Bonferroni correction for multiple testing

    Args:
        pvalues: Array of p-values
        alpha: Family-wise error rate (default: 0.05)
        n_tests: Size of the test family when only part of it was observed
            (default: len(pvalues))

    Returns:
        Tuple of (corrected_pvalues, corrected_threshold)
    """
    pvalues = np.asarray(pvalues, dtype=np.float64)
    if n_tests is None:
        n_tests = len(pvalues)
    corrected_threshold = alpha / n_tests
    corrected_pvalues = np.minimum(pvalues * n_tests, 1.0)

    return corrected_pvalues, corrected_threshold


def fdr_correction(pvalues: np.ndarray, alpha: float = 0.05, method: str = 'bh') -> Tuple[np.ndarray, np.ndarray]:
    """Apply False Discovery Rate correction (Benjamini-Hochberg)

    Args:
        pvalues: Array of p-values
        alpha: False discovery rate (default: 0.05)
        method: Method ('bh' for Benjamini-Hochberg)

    Returns:
        Tuple of (rejected_hypotheses, corrected_pvalues)
    """
    pvalues = np.asarray(pvalues, dtype=np.float64)
    if pvalues.size == 0:
        return np.zeros(0, dtype=bool), np.zeros(0, dtype=np.float64)

    # mergesort keeps tied p-values in input order
    pvalues_sortind = np.argsort(pvalues, kind='mergesort')
    pvalues_sorted = pvalues[pvalues_sortind]
    sortrevind = pvalues_sortind.argsort()

    if method == 'bh':
        # Benjamini-Hochberg procedure
        n = len(pvalues)
        i = np.arange(1, n + 1)
        corrected = pvalues_sorted * n / i
        corrected = np.minimum.accumulate(corrected[::-1])[::-1]
        corrected = np.minimum(corrected, 1.0)
        corrected_pvalues = corrected[sortrevind]
        rejected = corrected_pvalues <= alpha
    else:
        raise ValueError(f"Unknown method: {method}")

    return rejected, corrected_pvalues


def realized_heritability(genetic: np.ndarray, phenotype: np.ndarray) -> float:
    """Fraction of sample phenotypic variance explained by the genetic signal

    Returns NaN when the phenotype has no variance.
    """
    total_var = float(np.var(phenotype))
    if total_var <= 0.0:
        return float('nan')
    return float(np.var(genetic)) / total_var

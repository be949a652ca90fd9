"""
Per-locus Welch two-sample t-test

Each causal locus splits the cohort into non-carriers (genotype 0) and
carriers (genotype 1); phenotypes of the two groups are compared with an
unequal-variance t-test. Loci that cannot be tested resolve to p = 1:
- either group has fewer than 2 members
- both groups are constant, so the standard error is zero
"""

import numpy as np
from typing import Tuple
from scipy import stats

MIN_GROUP_SIZE = 2


def compute_fast_pvalues(t_stats: np.ndarray, dfs: np.ndarray) -> np.ndarray:
    """Two-sided p-values from t statistics; NaN entries map to 1"""
    t_stats = np.asarray(t_stats, dtype=np.float64)
    dfs = np.asarray(dfs, dtype=np.float64)
    pvalues = np.ones_like(t_stats, dtype=np.float64)
    valid_mask = ~np.isnan(t_stats) & ~np.isnan(dfs) & (dfs > 0)

    if np.any(valid_mask):
        # stats.t.sf keeps precision for very small p-values
        pvalues[valid_mask] = 2.0 * stats.t.sf(np.abs(t_stats[valid_mask]), dfs[valid_mask])

    return np.clip(pvalues, 0.0, 1.0)


def welch_statistics(genotypes: np.ndarray, phenotype: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Welch t statistics and Welch-Satterthwaite degrees of freedom

    t is mean(group 0) - mean(group 1) over its standard error. Loci that
    cannot be tested get NaN for both values.

    Returns:
        Tuple of (t_stats, dfs), each of length n_loci
    """
    genotypes = np.asarray(genotypes)
    y = np.asarray(phenotype, dtype=np.float64)
    if genotypes.ndim != 2 or genotypes.shape[0] != y.shape[0]:
        raise ValueError(
            f"Genotype matrix {genotypes.shape} does not match phenotype length {y.shape[0]}"
        )

    n_loci = genotypes.shape[1]
    t_stats = np.full(n_loci, np.nan)
    dfs = np.full(n_loci, np.nan)

    in_a = genotypes == 0
    in_b = genotypes == 1
    n_a = in_a.sum(axis=0)
    n_b = in_b.sum(axis=0)
    testable = (n_a >= MIN_GROUP_SIZE) & (n_b >= MIN_GROUP_SIZE)
    if not np.any(testable):
        return t_stats, dfs

    in_a = in_a[:, testable].astype(np.float64)
    in_b = in_b[:, testable].astype(np.float64)
    n_a = n_a[testable].astype(np.float64)
    n_b = n_b[testable].astype(np.float64)

    y_col = y[:, np.newaxis]
    mean_a = (y @ in_a) / n_a
    mean_b = (y @ in_b) / n_b
    var_a = np.sum(np.where(in_a > 0, (y_col - mean_a) ** 2, 0.0), axis=0) / (n_a - 1.0)
    var_b = np.sum(np.where(in_b > 0, (y_col - mean_b) ** 2, 0.0), axis=0) / (n_b - 1.0)

    se2_a = var_a / n_a
    se2_b = var_b / n_b
    se2 = se2_a + se2_b

    with np.errstate(divide='ignore', invalid='ignore'):
        t = np.where(se2 > 0.0, (mean_a - mean_b) / np.sqrt(se2), np.nan)
        df = np.where(
            se2 > 0.0,
            se2 ** 2 / (se2_a ** 2 / (n_a - 1.0) + se2_b ** 2 / (n_b - 1.0)),
            np.nan,
        )

    t_stats[testable] = t
    dfs[testable] = df
    return t_stats, dfs


def welch_pvalues(genotypes: np.ndarray, phenotype: np.ndarray) -> np.ndarray:
    """Per-locus Welch t-test p-values; untestable loci get p = 1"""
    t_stats, dfs = welch_statistics(genotypes, phenotype)
    return compute_fast_pvalues(t_stats, dfs)

"""
Cohort genotype simulation under linkage equilibrium
"""

import numpy as np

from ..utils.data_types import ConfigurationError


def simulate_genotypes(frequencies: np.ndarray, cohort_size: int,
                       rng: np.random.Generator) -> np.ndarray:
    """Draw a haploid 0/1 genotype matrix

    Each entry is an independent Bernoulli draw with the locus frequency as
    success probability; loci and individuals are independent.

    Args:
        frequencies: Minor allele frequency per locus (length n)
        cohort_size: Number of individuals (K)
        rng: Generator consumed for the draws

    Returns:
        int8 matrix of shape (K, n)
    """
    frequencies = np.asarray(frequencies, dtype=np.float64)
    if cohort_size <= 0:
        raise ConfigurationError("cohort_size", f"must be positive, got {cohort_size}")

    draws = rng.random((int(cohort_size), frequencies.shape[0]))
    return (draws < frequencies[np.newaxis, :]).astype(np.int8)

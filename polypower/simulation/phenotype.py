"""
Additive phenotype synthesis with calibrated Gaussian noise
"""

import numpy as np

from ..utils.data_types import PhenotypeDraw


def synthesize_phenotype(genotypes: np.ndarray, effects: np.ndarray, noise_sd: float,
                         rng: np.random.Generator) -> PhenotypeDraw:
    """Compute y = G @ beta + e with e ~ N(0, noise_sd^2)

    Args:
        genotypes: Genotype matrix (individuals x causal loci)
        effects: Effect size per causal locus
        noise_sd: Residual standard deviation (sigma)
        rng: Generator consumed for the noise draw

    Returns:
        PhenotypeDraw with genetic signal, noise and phenotype vectors
    """
    genotypes = np.asarray(genotypes, dtype=np.float64)
    effects = np.asarray(effects, dtype=np.float64)
    if genotypes.ndim != 2 or genotypes.shape[1] != effects.shape[0]:
        raise ValueError(
            f"Genotype matrix {genotypes.shape} does not match {effects.shape[0]} effects"
        )
    if not noise_sd >= 0.0:
        raise ValueError(f"Noise standard deviation must be non-negative, got {noise_sd}")

    genetic = genotypes @ effects
    noise = rng.normal(0.0, noise_sd, size=genetic.shape[0])
    return PhenotypeDraw(genetic=genetic, noise=noise, phenotype=genetic + noise)

"""
Genetic architecture parameterisation.

Turns frequency classes and an effect-size scheme into per-locus allele
frequencies and effects, and derives the variance components used to
calibrate phenotype noise to a target heritability.
"""

import warnings
from typing import Dict, List, Sequence, Union

import numpy as np

from ..utils.data_types import (
    ConfigurationError,
    FrequencyClass,
    GeneticArchitecture,
    Scenario,
)

EFFECT_SCHEMES = ('ramp', 'constant', 'null')

EffectScheme = Union[str, Sequence[float], np.ndarray]


def _partition_loci(frequency_classes: Sequence[FrequencyClass], n_causal: int) -> List[int]:
    """Number of loci per class; unsized classes share the remainder evenly"""
    explicit = [fc.n_loci for fc in frequency_classes if fc.n_loci is not None]
    for count in explicit:
        if count < 0:
            raise ConfigurationError("frequency_classes", f"n_loci must be non-negative, got {count}")

    remaining = n_causal - sum(explicit)
    n_unsized = sum(1 for fc in frequency_classes if fc.n_loci is None)

    if n_unsized == 0:
        if remaining != 0:
            raise ConfigurationError(
                "frequency_classes",
                f"class sizes sum to {sum(explicit)} but n_causal is {n_causal}",
            )
        return [int(fc.n_loci) for fc in frequency_classes]

    if remaining < 0 or remaining % n_unsized != 0:
        raise ConfigurationError(
            "frequency_classes",
            f"{remaining} remaining loci cannot be split evenly across {n_unsized} classes",
        )
    share = remaining // n_unsized
    return [int(fc.n_loci) if fc.n_loci is not None else share for fc in frequency_classes]


def _class_effects(scheme: str, size: int) -> np.ndarray:
    if scheme == 'ramp':
        return np.arange(1, size + 1, dtype=np.float64)
    if scheme == 'constant':
        return np.ones(size, dtype=np.float64)
    return np.zeros(size, dtype=np.float64)


def build_architecture(frequency_classes: Sequence[FrequencyClass],
                       n_causal: int,
                       n_total: int,
                       effect_scheme: EffectScheme = 'ramp') -> GeneticArchitecture:
    """Derive per-locus frequencies and effect sizes

    Args:
        frequency_classes: Classes partitioning the causal loci, in locus order
        n_causal: Number of causal loci (n)
        n_total: Number of tested loci (N), n <= N
        effect_scheme: 'ramp' (1..m within each class of size m), 'constant'
            (all ones), 'null' (all zeros) or an explicit sequence of n effects

    Returns:
        GeneticArchitecture with loci ordered class by class

    Raises:
        ConfigurationError: On any invalid parameter
    """
    if int(n_causal) != n_causal or n_causal <= 0:
        raise ConfigurationError("n_causal", f"must be a positive integer, got {n_causal}")
    if int(n_total) != n_total or n_total <= 0:
        raise ConfigurationError("n_total", f"must be a positive integer, got {n_total}")
    if n_causal > n_total:
        raise ConfigurationError(
            "n_causal", f"causal loci ({n_causal}) cannot exceed tested loci ({n_total})"
        )
    if len(frequency_classes) == 0:
        raise ConfigurationError("frequency_classes", "at least one class is required")

    for fc in frequency_classes:
        if not (0.0 < fc.frequency < 1.0):
            raise ConfigurationError(
                "frequency_classes",
                f"class '{fc.name}' frequency must lie in (0, 1), got {fc.frequency}",
            )

    sizes = _partition_loci(frequency_classes, int(n_causal))

    frequencies = np.concatenate([
        np.full(size, fc.frequency, dtype=np.float64)
        for fc, size in zip(frequency_classes, sizes)
    ])
    labels = tuple(
        fc.name for fc, size in zip(frequency_classes, sizes) for _ in range(size)
    )

    if isinstance(effect_scheme, str):
        if effect_scheme not in EFFECT_SCHEMES:
            raise ConfigurationError(
                "effect_scheme",
                f"unknown scheme '{effect_scheme}', expected one of {', '.join(EFFECT_SCHEMES)}",
            )
        effects = np.concatenate([_class_effects(effect_scheme, size) for size in sizes])
    else:
        effects = np.asarray(effect_scheme, dtype=np.float64)
        if effects.shape != (n_causal,):
            raise ConfigurationError(
                "effect_scheme",
                f"explicit effects must have length {n_causal}, got shape {effects.shape}",
            )
        if not np.all(np.isfinite(effects)):
            raise ConfigurationError("effect_scheme", "explicit effects must be finite")

    return GeneticArchitecture(
        frequencies=frequencies,
        effects=effects,
        n_total=int(n_total),
        class_labels=labels,
    )


def variance_components(architecture: GeneticArchitecture, scenario: Scenario) -> Dict[str, float]:
    """Genetic, residual and total variance for a scenario

    Returns:
        Dictionary with keys 'vg', 'sigma2', 'vt'
    """
    vg = architecture.genetic_variance
    sigma2 = scenario.residual_variance(architecture)
    return {'vg': vg, 'sigma2': sigma2, 'vt': vg + sigma2}


def check_scenario(architecture: GeneticArchitecture, scenario: Scenario) -> None:
    """Validate a scenario against the architecture it will be simulated with

    Warns when some loci expect fewer than two individuals in either genotype
    group, since those loci will often fall back to p = 1.
    """
    scenario.validate()
    carriers = architecture.expected_carriers(scenario.cohort_size)
    smaller_group = np.minimum(carriers, scenario.cohort_size - carriers)
    sparse = np.where(smaller_group < 2.0)[0]
    if sparse.size > 0:
        warnings.warn(
            f"Scenario '{scenario.name}': {sparse.size} of {architecture.n_causal} causal loci expect "
            f"fewer than 2 members in one genotype group (K={scenario.cohort_size}); "
            f"their tests will often be skipped (p = 1)",
            UserWarning,
            stacklevel=2,
        )

"""
Deterministic seed derivation for replicate streams.

A master seed fans out into one SeedSequence per scenario, and each scenario
sequence fans out into one child per replicate. Every replicate therefore
owns an independent Generator and results do not depend on how replicates
are scheduled across workers.
"""

from typing import List, Optional, Union

import numpy as np

SeedLike = Union[int, np.random.SeedSequence, None]


def as_seed_sequence(seed: SeedLike) -> np.random.SeedSequence:
    """Normalise a seed into a SeedSequence with no children spawned yet

    A passed SeedSequence is copied so that spawning from the result never
    advances the caller's sequence.
    """
    if isinstance(seed, np.random.SeedSequence):
        return np.random.SeedSequence(
            entropy=seed.entropy,
            spawn_key=seed.spawn_key,
            pool_size=seed.pool_size,
        )
    if seed is not None:
        seed = int(seed)
        if seed < 0:
            raise ValueError(f"Seed must be non-negative, got {seed}")
    return np.random.SeedSequence(seed)


def scenario_seed_sequences(master_seed: SeedLike, n_scenarios: int) -> List[np.random.SeedSequence]:
    """One child sequence per scenario, in scenario order"""
    return as_seed_sequence(master_seed).spawn(n_scenarios)


def replicate_seed_sequences(scenario_seed: SeedLike, replicates: int) -> List[np.random.SeedSequence]:
    """One child sequence per replicate, in replicate order"""
    return as_seed_sequence(scenario_seed).spawn(replicates)


def rng_from_seed(seed: Optional[SeedLike]) -> np.random.Generator:
    """Construct a NumPy Generator from an int or SeedSequence."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(as_seed_sequence(seed))

"""
Replicate simulation loop for one scenario

Each replicate draws a cohort, synthesises phenotypes, tests every causal
locus and evaluates Bonferroni/FDR detections, yielding one
DetectionSummary. Replicates are independent: each gets its own child
SeedSequence, so the table is identical for any worker count or backend.
"""

import time
from typing import List, Optional

import numpy as np
from joblib import Parallel, delayed
from tqdm import tqdm

from ..association.multiple_testing import evaluate_detections, validate_thresholds
from ..association.welch import welch_pvalues
from ..simulation.cohort import simulate_genotypes
from ..simulation.phenotype import synthesize_phenotype
from ..utils.data_types import (
    ConfigurationError,
    DetectionSummary,
    GeneticArchitecture,
    ReplicateTable,
    Scenario,
)
from ..utils.seeding import SeedLike, replicate_seed_sequences, rng_from_seed
from ..utils.stats import realized_heritability


def simulate_replicate(architecture: GeneticArchitecture,
                       scenario: Scenario,
                       seed: SeedLike,
                       alpha: float = 0.05,
                       fdr_threshold: float = 0.5) -> DetectionSummary:
    """Run cohort -> phenotype -> tests -> corrections once"""
    rng = rng_from_seed(seed)
    noise_sd = float(np.sqrt(scenario.residual_variance(architecture)))

    genotypes = simulate_genotypes(architecture.frequencies, scenario.cohort_size, rng)
    draw = synthesize_phenotype(genotypes, architecture.effects, noise_sd, rng)
    pvalues = welch_pvalues(genotypes, draw.phenotype)
    counts = evaluate_detections(pvalues, architecture.n_total, alpha, fdr_threshold, rng)

    return DetectionSummary(
        minp=float(np.min(pvalues)),
        maxp=float(np.max(pvalues)),
        bonf_true=counts.bonf_true,
        fdr_detect=counts.fdr_detect,
        fdr_true=counts.fdr_true,
        h2=realized_heritability(draw.genetic, draw.phenotype),
    )


def run_replicates(architecture: GeneticArchitecture,
                   scenario: Scenario,
                   replicates: int,
                   seed_sequence: SeedLike = None,
                   alpha: float = 0.05,
                   fdr_threshold: float = 0.5,
                   n_jobs: int = 1,
                   backend: str = 'loky',
                   verbose: bool = False) -> ReplicateTable:
    """Simulate R replicates of a scenario

    Args:
        architecture: Causal loci shared by every replicate
        scenario: Cohort size and heritability (or explicit noise variance)
        replicates: Number of replicates (R)
        seed_sequence: Seed for this scenario; child streams are spawned per replicate
        alpha: Bonferroni family-wise error rate
        fdr_threshold: q-value cutoff for FDR hits
        n_jobs: joblib worker count (1 runs in-process)
        backend: joblib backend ('loky', 'threading', 'multiprocessing')
        verbose: Print progress information

    Returns:
        ReplicateTable tagged with the scenario name, rows in replicate order
    """
    if int(replicates) != replicates or replicates <= 0:
        raise ConfigurationError("replicates", f"must be a positive integer, got {replicates}")
    if n_jobs == 0:
        raise ConfigurationError("n_jobs", "must be non-zero (use -1 for all cores)")
    scenario.validate()
    validate_thresholds(alpha, fdr_threshold)
    # Fail before any replicate runs when the noise cannot be derived
    scenario.residual_variance(architecture)

    seeds = replicate_seed_sequences(seed_sequence, int(replicates))
    start_time = time.time()

    progress = tqdm(
        seeds,
        total=len(seeds),
        desc=f"{scenario.name}",
        unit="rep",
        disable=not verbose,
    )

    if n_jobs == 1:
        entries: List[DetectionSummary] = [
            simulate_replicate(architecture, scenario, seed, alpha, fdr_threshold)
            for seed in progress
        ]
    else:
        if verbose:
            print(f"Running {len(seeds)} replicates of '{scenario.name}' with n_jobs={n_jobs} ({backend})")
        entries = Parallel(n_jobs=n_jobs, backend=backend)(
            delayed(simulate_replicate)(architecture, scenario, seed, alpha, fdr_threshold)
            for seed in progress
        )

    if verbose:
        elapsed = time.time() - start_time
        print(f"Scenario '{scenario.name}': {len(entries)} replicates completed in {elapsed:.2f} seconds")

    return ReplicateTable(dataset=scenario.name, entries=entries)


def describe_replicates(table: ReplicateTable, n_causal: Optional[int] = None) -> str:
    """One-line description of a replicate table for progress output"""
    bonf = table.column('bonf_true').astype(np.float64)
    fdr_true = table.column('fdr_true').astype(np.float64)
    text = (
        f"{table.dataset}: {len(table)} replicates, "
        f"mean Bonferroni true hits {bonf.mean():.2f}, mean FDR true hits {fdr_true.mean():.2f}"
    )
    if n_causal:
        text += f" (of {n_causal} causal loci)"
    return text

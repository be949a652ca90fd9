"""
Power Analysis Pipeline Module

This module runs a complete power analysis: it derives the genetic
architecture once, validates every scenario, simulates the replicate
tables scenario by scenario from one master seed, and summarises the
concatenated results for reporting.
"""

import time
import numpy as np
import pandas as pd
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..config import PowerConfig, default_config
from ..reporting.summary import summarize_power, cumulative_detection_table
from ..simulation.architecture import check_scenario, variance_components
from ..utils.data_types import GeneticArchitecture, ReplicateTable, concat_tables
from ..utils.seeding import scenario_seed_sequences
from .replicates import run_replicates, describe_replicates


class PowerPipeline:
    """
    Pipeline for Monte Carlo power analysis of additive polygenic architectures.

    This class manages the lifecycle of a power analysis:
    1. Configuration validation (fails before any simulation work)
    2. Architecture derivation (frequencies, effects, variance components)
    3. Replicate simulation for each scenario
    4. Result concatenation and power summaries
    """

    def __init__(self, config: Optional[PowerConfig] = None,
                 output_dir: Optional[Union[str, Path]] = None,
                 verbose: bool = True):
        """
        Initialize the power pipeline.

        Args:
            config: Run parameters (default: the reference two-scenario study)
            output_dir: Directory for exported CSV tables; nothing is written when None
            verbose: Print progress information
        """
        self.config = config if config is not None else default_config()
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.verbose = verbose

        self.architecture: Optional[GeneticArchitecture] = None
        self.variances: Dict[str, Dict[str, float]] = {}
        self.tables: Dict[str, ReplicateTable] = {}
        self.results: Optional[pd.DataFrame] = None

    def log(self, message: str):
        """Internal logger, silent unless verbose"""
        if self.verbose:
            print(message)

    def log_step(self, step_name: str, start_time: Optional[float] = None):
        """Log a pipeline step with optional timing"""
        if start_time is not None:
            elapsed = time.time() - start_time
            self.log(f"{step_name} completed in {elapsed:.2f} seconds")
        else:
            self.log(f"{step_name}...")

    def build_architecture(self) -> GeneticArchitecture:
        """Validate the configuration and derive the causal architecture

        Raises:
            ConfigurationError: If any parameter is invalid
        """
        self.log_step("Step 1: Validating configuration and deriving architecture")
        self.config.validate()
        architecture = self.config.build_architecture()

        self.log(f"   {architecture.n_causal} causal loci among {architecture.n_total} tested loci")
        for label in dict.fromkeys(architecture.class_labels):
            mask = np.array([lab == label for lab in architecture.class_labels])
            freq = architecture.frequencies[mask][0]
            effects = ", ".join(f"{b:g}" for b in architecture.effects[mask])
            self.log(f"   {label}: f={freq:g}, effects [{effects}]")

        variances = {}
        for scenario in self.config.scenarios:
            check_scenario(architecture, scenario)
            components = variance_components(architecture, scenario)
            variances[scenario.name] = components
            self.log(
                f"   {scenario.name}: K={scenario.cohort_size}, h2={scenario.heritability:g}, "
                f"vg={components['vg']:.4g}, sigma2={components['sigma2']:.4g}, vt={components['vt']:.4g}"
            )

        self.architecture = architecture
        self.variances = variances
        return architecture

    def run(self, n_jobs: int = 1, backend: str = 'loky') -> pd.DataFrame:
        """
        Simulate every scenario and return the concatenated results table.

        Args:
            n_jobs: joblib worker count for replicates (1 runs in-process)
            backend: joblib backend

        Returns:
            DataFrame with columns minp, maxp, bonf_true, fdr_detect, fdr_true, h2, dataset
        """
        if self.architecture is None:
            self.build_architecture()

        config = self.config
        step_start = time.time()
        self.log_step(f"Step 2: Simulating {config.replicates} replicates per scenario")

        seeds = scenario_seed_sequences(config.seed, len(config.scenarios))
        tables: List[ReplicateTable] = []
        for scenario, seed in zip(config.scenarios, seeds):
            table = run_replicates(
                self.architecture,
                scenario,
                replicates=config.replicates,
                seed_sequence=seed,
                alpha=config.alpha,
                fdr_threshold=config.fdr_threshold,
                n_jobs=n_jobs,
                backend=backend,
                verbose=self.verbose,
            )
            self.tables[scenario.name] = table
            tables.append(table)
            self.log(f"   {describe_replicates(table, self.architecture.n_causal)}")

        self.results = concat_tables(tables)
        self.log_step("Replicate simulation", step_start)
        return self.results

    def _require_results(self) -> pd.DataFrame:
        if self.results is None:
            raise RuntimeError("No results available; call run() first")
        return self.results

    def summarize(self) -> pd.DataFrame:
        """Per-scenario power summary of the last run"""
        return summarize_power(self._require_results(), self.config.n_causal)

    def cumulative_table(self, column: str = 'bonf_true') -> pd.DataFrame:
        """Percentage of replicates with at least k detections, per scenario"""
        return cumulative_detection_table(self._require_results(), self.config.n_causal, column=column)

    def save_results(self) -> List[Path]:
        """Write the replicate table and summaries as CSV into output_dir"""
        results = self._require_results()
        if self.output_dir is None:
            raise RuntimeError("No output_dir configured for this pipeline")
        self.output_dir.mkdir(parents=True, exist_ok=True)

        files = []
        replicates_file = self.output_dir / "replicates.csv"
        results.to_csv(replicates_file, index=False)
        files.append(replicates_file)

        summary_file = self.output_dir / "power_summary.csv"
        self.summarize().to_csv(summary_file)
        files.append(summary_file)

        for column in ('bonf_true', 'fdr_true'):
            cumulative_file = self.output_dir / f"cumulative_{column}.csv"
            self.cumulative_table(column).to_csv(cumulative_file)
            files.append(cumulative_file)

        for path in files:
            self.log(f"   Saved {path}")
        return files


def run_power_analysis(config: Optional[PowerConfig] = None,
                       n_jobs: int = 1,
                       backend: str = 'loky',
                       verbose: bool = False) -> pd.DataFrame:
    """Run every scenario of a configuration and return the results table"""
    pipeline = PowerPipeline(config=config, verbose=verbose)
    return pipeline.run(n_jobs=n_jobs, backend=backend)

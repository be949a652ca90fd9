"""
polypower: Monte Carlo power analysis for additive polygenic association studies

Simulates haploid cohorts under a fixed additive architecture, tests every
causal locus with a Welch t-test, and estimates how often true loci are
detected under Bonferroni and FDR correction.
"""

__version__ = "0.1.0"
__author__ = "polypower Development Team"

from .config import PowerConfig, default_config, load_config
from .utils.data_types import (
    ConfigurationError,
    FrequencyClass,
    GeneticArchitecture,
    Scenario,
    DetectionSummary,
    ReplicateTable,
)
from .simulation.architecture import build_architecture
from .pipelines.replicates import run_replicates, simulate_replicate
from .pipelines.power import PowerPipeline, run_power_analysis
from .reporting.summary import summarize_power, cumulative_detection_table

__all__ = [
    'PowerConfig',
    'default_config',
    'load_config',
    'ConfigurationError',
    'FrequencyClass',
    'GeneticArchitecture',
    'Scenario',
    'DetectionSummary',
    'ReplicateTable',
    'build_architecture',
    'run_replicates',
    'simulate_replicate',
    'PowerPipeline',
    'run_power_analysis',
    'summarize_power',
    'cumulative_detection_table',
]

"""
Replicate aggregation and the two-scenario power pipeline
"""

from .replicates import simulate_replicate, run_replicates
from .power import PowerPipeline, run_power_analysis

__all__ = ['simulate_replicate', 'run_replicates', 'PowerPipeline', 'run_power_analysis']

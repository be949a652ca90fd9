"""
Genetic architecture, cohort and phenotype simulation
"""

from .architecture import build_architecture, variance_components, check_scenario
from .cohort import simulate_genotypes
from .phenotype import synthesize_phenotype

__all__ = [
    'build_architecture',
    'variance_components',
    'check_scenario',
    'simulate_genotypes',
    'synthesize_phenotype',
]

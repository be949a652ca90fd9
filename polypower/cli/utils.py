import argparse
from typing import List, Optional

from ..config import PowerConfig, default_config, load_config

BACKEND_CHOICES = ('loky', 'threading', 'multiprocessing')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monte Carlo power analysis for additive polygenic association studies",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument("--config", "-c", default=None,
                       help="JSON configuration file (defaults to the reference two-scenario study)")
    parser.add_argument("--outputdir", "-o", default="./power_results",
                       help="Output directory")

    # Overrides
    parser.add_argument("--replicates", "-r", type=int, default=None,
                       help="Replicates per scenario (overrides config)")
    parser.add_argument("--seed", type=int, default=None,
                       help="Master random seed (overrides config)")
    parser.add_argument("--alpha", type=float, default=None,
                       help="Bonferroni alpha (overrides config)")
    parser.add_argument("--fdr-threshold", type=float, default=None,
                       help="FDR q-value cutoff (overrides config)")

    # Execution
    parser.add_argument("--n-jobs", type=int, default=1,
                       help="Parallel workers for replicates (-1 for all cores)")
    parser.add_argument("--backend", default="loky", choices=list(BACKEND_CHOICES),
                       help="joblib backend")
    parser.add_argument("--quiet", "-q", action='store_true',
                       help="Suppress progress output")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments for the power pipeline"""
    return build_parser().parse_args(argv)


def config_from_args(args: argparse.Namespace) -> PowerConfig:
    """Load the configuration file (if any) and apply command line overrides"""
    config = load_config(args.config) if args.config else default_config()
    return config.with_overrides(
        replicates=args.replicates,
        seed=args.seed,
        alpha=args.alpha,
        fdr_threshold=args.fdr_threshold,
    )

#!/usr/bin/env python3
"""
Example 01: Basic Power Analysis

This example runs the reference two-scenario study (susceptible-only and
susceptible-plus-resistant cohorts) with a reduced replicate count and
prints the Bonferroni and FDR power of each scenario.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from polypower.config import default_config
from polypower.pipelines.power import PowerPipeline


def parse_args():
    parser = argparse.ArgumentParser(description="Example 01: Basic Power Analysis")
    parser.add_argument("--replicates", type=int, default=200)
    parser.add_argument("--seed", type=int, default=2024)
    parser.add_argument("--n-jobs", type=int, default=1)
    parser.add_argument("--output", default="./example01_results")
    return parser.parse_args()


def main():
    print("=" * 70)
    print("EXAMPLE 01: Basic Power Analysis")
    print("=" * 70)

    args = parse_args()
    config = default_config().with_overrides(replicates=args.replicates, seed=args.seed)
    pipeline = PowerPipeline(config=config, output_dir=args.output)

    print("\n1. Deriving architecture...")
    pipeline.build_architecture()

    print("\n2. Simulating replicates...")
    pipeline.run(n_jobs=args.n_jobs)

    print("\n3. Summarising...")
    print(pipeline.summarize()[['bonferroni_power', 'fdr_power', 'mean_fdp', 'mean_h2']].round(3))
    pipeline.save_results()

    print("\n" + "=" * 70)
    print("Analysis Complete!")
    print("=" * 70)
    print(f"\nResults saved to: {args.output}/")


if __name__ == "__main__":
    main()

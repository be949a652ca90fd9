#!/usr/bin/env python3
"""
Power analysis for additive polygenic association studies using polypower
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pandas as pd

from polypower.cli.utils import parse_args, config_from_args
from polypower.pipelines.power import PowerPipeline


def main(argv=None):
    args = parse_args(argv)
    config = config_from_args(args)

    pipeline = PowerPipeline(config=config, output_dir=args.outputdir, verbose=not args.quiet)

    # 1. Architecture and scenario checks
    pipeline.build_architecture()

    # 2. Replicates
    pipeline.run(n_jobs=args.n_jobs, backend=args.backend)

    # 3. Summaries
    summary = pipeline.summarize()
    files = pipeline.save_results()

    if not args.quiet:
        with pd.option_context('display.width', 120, 'display.max_columns', None):
            print("\nPower summary")
            print(summary.round(4).to_string())
            print("\nReplicates with at least k Bonferroni-significant causal loci (%)")
            print(pipeline.cumulative_table('bonf_true').round(1).to_string())
        print(f"\nResults saved to: {args.outputdir}/")
        for path in files:
            print(f"- {path.name}")

    return summary


if __name__ == "__main__":
    main()

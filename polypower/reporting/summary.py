"""
Tabular summaries of replicate tables

These consume the results table (columns minp, maxp, bonf_true, fdr_detect,
fdr_true, h2, dataset) and produce per-dataset power estimates and
cumulative detection percentages for downstream reporting.
"""

from typing import List, Optional

import numpy as np
import pandas as pd

from ..utils.data_types import RESULT_COLUMNS

DETECTION_COLUMNS = ('bonf_true', 'fdr_true', 'fdr_detect')


def _check_results(results: pd.DataFrame) -> None:
    missing = [col for col in RESULT_COLUMNS if col not in results.columns]
    if missing:
        raise ValueError(f"Results table is missing columns: {', '.join(missing)}")


def summarize_power(results: pd.DataFrame, n_causal: int) -> pd.DataFrame:
    """Per-dataset power estimates

    Args:
        results: Replicate table, one row per replicate per dataset
        n_causal: Number of causal loci (n)

    Returns:
        DataFrame indexed by dataset with columns replicates,
        mean_bonf_true, bonferroni_power, mean_fdr_true, fdr_power,
        mean_fdr_detect, mean_fdp and mean_h2. mean_fdp averages the false
        discovery proportion over replicates with at least one FDR hit and is
        NaN when no replicate had one.
    """
    _check_results(results)
    if n_causal <= 0:
        raise ValueError(f"n_causal must be positive, got {n_causal}")

    rows = []
    for dataset, group in results.groupby('dataset', sort=False):
        fdr_detect = group['fdr_detect'].astype(np.float64)
        fdr_true = group['fdr_true'].astype(np.float64)
        with_hits = fdr_detect > 0
        if with_hits.any():
            fdp = ((fdr_detect[with_hits] - fdr_true[with_hits]) / fdr_detect[with_hits]).mean()
        else:
            fdp = np.nan

        rows.append({
            'dataset': dataset,
            'replicates': len(group),
            'mean_bonf_true': group['bonf_true'].mean(),
            'bonferroni_power': group['bonf_true'].mean() / n_causal,
            'mean_fdr_true': fdr_true.mean(),
            'fdr_power': fdr_true.mean() / n_causal,
            'mean_fdr_detect': fdr_detect.mean(),
            'mean_fdp': fdp,
            'mean_h2': group['h2'].mean(),
        })

    return pd.DataFrame(rows).set_index('dataset')


def cumulative_detection_table(results: pd.DataFrame, n_causal: int,
                               column: str = 'bonf_true',
                               max_count: Optional[int] = None) -> pd.DataFrame:
    """Percentage of replicates with at least k detections

    Args:
        results: Replicate table
        n_causal: Number of causal loci; k runs from 0 to n_causal by default
        column: Detection count column ('bonf_true', 'fdr_true' or 'fdr_detect')
        max_count: Largest k to tabulate (default: n_causal)

    Returns:
        DataFrame with one row per k (index 'at_least') and one column per dataset
    """
    _check_results(results)
    if column not in DETECTION_COLUMNS:
        raise ValueError(f"Unknown detection column: {column}")
    if max_count is None:
        max_count = n_causal

    thresholds = np.arange(0, int(max_count) + 1)
    table = {}
    datasets: List[str] = list(pd.unique(results['dataset']))
    for dataset in datasets:
        counts = results.loc[results['dataset'] == dataset, column].to_numpy()
        table[dataset] = [100.0 * np.mean(counts >= k) for k in thresholds]

    frame = pd.DataFrame(table, index=pd.Index(thresholds, name='at_least'))
    return frame

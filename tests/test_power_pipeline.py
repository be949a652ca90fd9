"""Integration tests for the power pipeline"""

import warnings

import numpy as np
import pandas as pd
import pytest

from polypower.config import PowerConfig
from polypower.pipelines import power
from polypower.pipelines.power import PowerPipeline, run_power_analysis
from polypower.utils.data_types import RESULT_COLUMNS, ConfigurationError, FrequencyClass, Scenario


def _small_config(**overrides) -> PowerConfig:
    config = PowerConfig(
        n_causal=6,
        n_total=200,
        frequency_classes=(FrequencyClass('uncommon', 0.2), FrequencyClass('common', 0.4)),
        scenarios=(
            Scenario('small', cohort_size=120, heritability=0.4),
            Scenario('large', cohort_size=240, heritability=0.4),
        ),
        replicates=20,
        seed=17,
    )
    return config.with_overrides(**overrides)


def test_pipeline_run_produces_results_table() -> None:
    pipeline = PowerPipeline(config=_small_config(), verbose=False)

    results = pipeline.run()

    assert list(results.columns) == list(RESULT_COLUMNS)
    assert len(results) == 40
    assert list(pd.unique(results['dataset'])) == ['small', 'large']
    assert pipeline.architecture.n_causal == 6
    assert set(pipeline.variances) == {'small', 'large'}
    assert set(pipeline.tables) == {'small', 'large'}


def test_pipeline_is_reproducible_from_master_seed() -> None:
    first = run_power_analysis(_small_config())
    second = run_power_analysis(_small_config())
    reseeded = run_power_analysis(_small_config(seed=18))

    pd.testing.assert_frame_equal(first, second)
    assert not first.equals(reseeded)


def test_scenarios_use_distinct_streams() -> None:
    config = _small_config(scenarios=(
        Scenario('a', cohort_size=150, heritability=0.4),
        Scenario('b', cohort_size=150, heritability=0.4),
    ))

    results = run_power_analysis(config)

    a = results[results['dataset'] == 'a'].drop(columns='dataset').reset_index(drop=True)
    b = results[results['dataset'] == 'b'].drop(columns='dataset').reset_index(drop=True)
    assert not a.equals(b)


def test_larger_cohort_is_at_least_as_powerful() -> None:
    pipeline = PowerPipeline(config=_small_config(replicates=200), verbose=False)
    pipeline.run()

    summary = pipeline.summarize()

    assert summary.loc['large', 'bonferroni_power'] >= summary.loc['small', 'bonferroni_power']
    assert np.all((summary['bonferroni_power'] >= 0) & (summary['bonferroni_power'] <= 1))


def test_summaries_require_a_run() -> None:
    pipeline = PowerPipeline(config=_small_config(), verbose=False)

    with pytest.raises(RuntimeError):
        pipeline.summarize()


def test_cumulative_table_shape() -> None:
    pipeline = PowerPipeline(config=_small_config(), verbose=False)
    pipeline.run()

    table = pipeline.cumulative_table('fdr_true')

    assert list(table.columns) == ['small', 'large']
    assert list(table.index) == list(range(7))
    assert (table.loc[0] == 100.0).all()


def test_save_results_writes_csv_tables(tmp_path) -> None:
    pipeline = PowerPipeline(config=_small_config(), output_dir=tmp_path / "out", verbose=False)
    pipeline.run()

    files = pipeline.save_results()

    names = sorted(path.name for path in files)
    assert names == [
        'cumulative_bonf_true.csv',
        'cumulative_fdr_true.csv',
        'power_summary.csv',
        'replicates.csv',
    ]
    saved = pd.read_csv(tmp_path / "out" / "replicates.csv")
    assert list(saved.columns) == list(RESULT_COLUMNS)
    assert len(saved) == 40


def test_save_results_without_output_dir_raises() -> None:
    pipeline = PowerPipeline(config=_small_config(), verbose=False)
    pipeline.run()

    with pytest.raises(RuntimeError):
        pipeline.save_results()


def test_invalid_config_fails_before_simulation(monkeypatch) -> None:
    def fail_run(*args, **kwargs):
        raise AssertionError("replicates should not run for an invalid configuration")

    monkeypatch.setattr(power, "run_replicates", fail_run)
    config = _small_config(scenarios=(
        Scenario('ok', cohort_size=100, heritability=0.4),
        Scenario('bad', cohort_size=100, heritability=0.0),
    ))

    with pytest.raises(ConfigurationError, match="heritability"):
        PowerPipeline(config=config, verbose=False).run()


def test_sparse_scenario_warns_during_architecture_build() -> None:
    config = _small_config(scenarios=(Scenario('tiny', cohort_size=6, heritability=0.4),))
    pipeline = PowerPipeline(config=config, verbose=False)

    with pytest.warns(UserWarning, match="fewer than 2"):
        pipeline.build_architecture()


def test_verbose_pipeline_logs_steps(capsys) -> None:
    pipeline = PowerPipeline(config=_small_config(replicates=3), verbose=True)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        pipeline.run()

    out = capsys.readouterr().out
    assert "Step 1" in out
    assert "Step 2" in out
    assert "small: 3 replicates" in out

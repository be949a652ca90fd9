import importlib.util
import json
from pathlib import Path

import pandas as pd
import pytest

from polypower.cli.utils import config_from_args, parse_args
from polypower.config import PowerConfig, default_config, load_config
from polypower.utils.data_types import ConfigurationError, FrequencyClass, Scenario

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "run_power_analysis.py"


def _load_script():
    module_spec = importlib.util.spec_from_file_location("run_power_analysis", SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def test_default_config_is_reference_study() -> None:
    config = default_config()

    assert config.n_causal == 15
    assert config.n_total == 4000
    assert [fc.frequency for fc in config.frequency_classes] == [0.02, 0.10, 0.30]
    assert [s.name for s in config.scenarios] == ['susceptible', 'susceptible_resistant']
    assert config.alpha == 0.05
    assert config.fdr_threshold == 0.5
    config.validate()


def test_dict_round_trip() -> None:
    config = default_config().with_overrides(replicates=10, effect_scheme=[0.5] * 15)

    restored = PowerConfig.from_dict(json.loads(json.dumps(config.to_dict())))

    assert restored == config


def test_load_config_from_json(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "n_causal": 4,
        "n_total": 100,
        "frequency_classes": [{"name": "only", "frequency": 0.25}],
        "scenarios": [{"name": "null", "cohort_size": 50, "heritability": 0.5, "noise_variance": 1.0}],
        "effect_scheme": "null",
        "replicates": 7,
        "seed": None,
    }))

    config = load_config(path)

    assert config.frequency_classes == (FrequencyClass('only', 0.25),)
    assert config.scenarios == (Scenario('null', 50, 0.5, noise_variance=1.0),)
    assert config.replicates == 7
    assert config.seed is None
    config.validate()


@pytest.mark.parametrize(
    "payload",
    [
        {"n_causal": 4, "cohorts": []},
        {"scenarios": [{"name": "x", "cohort_size": 10}]},
        {"frequency_classes": ["rare"]},
        [1, 2, 3],
        {"replicates": None},
        {"alpha": "0.05"},
        {"frequency_classes": [{"name": "a", "frequency": "0.1"}]},
        {"scenarios": [{"name": "s", "cohort_size": None, "heritability": 0.3}]},
        {"n_causal": 2.5},
        {"seed": True},
        {"effect_scheme": [1.0, "big"]},
        {"effect_scheme": 3},
        {"scenarios": [{"name": 7, "cohort_size": 10, "heritability": 0.3}]},
    ],
)
def test_from_dict_rejects_malformed_input(payload) -> None:
    with pytest.raises(ConfigurationError):
        PowerConfig.from_dict(payload).validate()


@pytest.mark.parametrize(
    "payload, parameter",
    [
        ({"replicates": None}, "replicates"),
        ({"alpha": "0.05"}, "alpha"),
        ({"frequency_classes": [{"name": "a", "frequency": "0.1"}]}, "frequency_classes[0].frequency"),
        (
            {"scenarios": [
                {"name": "ok", "cohort_size": 10, "heritability": 0.3},
                {"name": "s", "cohort_size": None, "heritability": 0.3},
            ]},
            "scenarios[1].cohort_size",
        ),
    ],
)
def test_from_dict_names_mistyped_value(payload, parameter) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        PowerConfig.from_dict(payload)
    assert excinfo.value.parameter == parameter


def test_from_dict_accepts_integral_floats_and_null_optionals() -> None:
    config = PowerConfig.from_dict({
        "replicates": 20.0,
        "seed": None,
        "scenarios": [{"name": "s", "cohort_size": 100.0, "heritability": 0.3, "noise_variance": None}],
    })

    assert config.replicates == 20
    assert isinstance(config.replicates, int)
    assert config.scenarios == (Scenario('s', 100, 0.3),)
    config.validate()


def test_load_config_rejects_bad_json(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError, match="not valid JSON"):
        load_config(path)


def test_with_overrides_ignores_none_and_rejects_unknown() -> None:
    config = default_config()

    assert config.with_overrides(seed=None, alpha=0.01).alpha == 0.01
    assert config.with_overrides(seed=None).seed == 2024
    with pytest.raises(ConfigurationError):
        config.with_overrides(cohorts=3)


@pytest.mark.parametrize(
    "overrides, parameter",
    [
        (dict(replicates=0), "replicates"),
        (dict(seed=-1), "seed"),
        (dict(alpha=0.0), "alpha"),
        (dict(fdr_threshold=1.5), "fdr_threshold"),
        (dict(scenarios=()), "scenarios"),
        (dict(n_total=10), "n_causal"),
    ],
)
def test_validate_reports_offending_parameter(overrides, parameter) -> None:
    config = default_config().with_overrides(**overrides)

    with pytest.raises(ConfigurationError) as excinfo:
        config.validate()
    assert excinfo.value.parameter == parameter


def test_duplicate_scenario_names_rejected() -> None:
    scenario = Scenario('same', cohort_size=100, heritability=0.3)
    config = default_config().with_overrides(scenarios=(scenario, scenario))

    with pytest.raises(ConfigurationError, match="duplicate"):
        config.validate()


def test_parse_args_defaults() -> None:
    args = parse_args([])

    assert args.config is None
    assert args.outputdir == "./power_results"
    assert args.n_jobs == 1
    assert args.backend == "loky"
    assert args.quiet is False
    assert config_from_args(args) == default_config()


def test_parse_args_overrides_config(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"replicates": 50, "seed": 1}))

    args = parse_args([
        "--config", str(path), "--replicates", "12", "--alpha", "0.01",
        "--fdr-threshold", "0.1", "--n-jobs", "2", "--backend", "threading", "-q",
    ])
    config = config_from_args(args)

    assert config.replicates == 12
    assert config.seed == 1
    assert config.alpha == 0.01
    assert config.fdr_threshold == 0.1
    assert args.n_jobs == 2
    assert args.backend == "threading"
    assert args.quiet is True


def test_parse_args_rejects_unknown_backend() -> None:
    with pytest.raises(SystemExit):
        parse_args(["--backend", "dask"])


def test_script_main_runs_end_to_end(tmp_path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({
        "n_causal": 6,
        "n_total": 200,
        "frequency_classes": [{"name": "a", "frequency": 0.2}, {"name": "b", "frequency": 0.4}],
        "scenarios": [{"name": "cohort", "cohort_size": 150, "heritability": 0.4}],
        "replicates": 5,
        "seed": 3,
    }))
    outdir = tmp_path / "results"

    script = _load_script()
    summary = script.main(["--config", str(config_path), "--outputdir", str(outdir), "--quiet"])

    assert list(summary.index) == ['cohort']
    assert (outdir / "replicates.csv").exists()
    assert (outdir / "power_summary.csv").exists()
    saved = pd.read_csv(outdir / "replicates.csv")
    assert len(saved) == 5

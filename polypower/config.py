"""
Run configuration for power simulations

A PowerConfig bundles every constant supplied at run start. It can be built
in code, from a plain dictionary, or from a JSON document with the same keys:

    {
        "n_causal": 15,
        "n_total": 4000,
        "frequency_classes": [{"name": "rare", "frequency": 0.02}, ...],
        "effect_scheme": "ramp",
        "scenarios": [{"name": "susceptible", "cohort_size": 407, "heritability": 0.3}, ...],
        "alpha": 0.05,
        "fdr_threshold": 0.5,
        "replicates": 1000,
        "seed": 2024
    }
"""

import json
from dataclasses import dataclass, asdict, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .association.multiple_testing import validate_thresholds
from .simulation.architecture import EffectScheme, build_architecture
from .utils.data_types import (
    ConfigurationError,
    FrequencyClass,
    GeneticArchitecture,
    Scenario,
    validate_scenarios,
)

DEFAULT_FREQUENCY_CLASSES: Tuple[FrequencyClass, ...] = (
    FrequencyClass('rare', 0.02),
    FrequencyClass('uncommon', 0.10),
    FrequencyClass('common', 0.30),
)

DEFAULT_SCENARIOS: Tuple[Scenario, ...] = (
    Scenario('susceptible', cohort_size=407, heritability=0.30),
    Scenario('susceptible_resistant', cohort_size=814, heritability=0.30),
)

CONFIG_KEYS = (
    'n_causal',
    'n_total',
    'frequency_classes',
    'effect_scheme',
    'scenarios',
    'alpha',
    'fdr_threshold',
    'replicates',
    'seed',
)

# Numeric document fields and the type they convert to
NUMERIC_FIELDS = {
    'n_causal': int,
    'n_total': int,
    'alpha': float,
    'fdr_threshold': float,
    'replicates': int,
    'seed': int,
}

RECORD_NUMERIC_FIELDS = {
    FrequencyClass: {'frequency': float, 'n_loci': int},
    Scenario: {'cohort_size': int, 'heritability': float, 'noise_variance': float},
}

NULLABLE_FIELDS = ('seed', 'n_loci', 'noise_variance')


@dataclass(frozen=True)
class PowerConfig:
    """Parameters of a power simulation run"""

    n_causal: int = 15
    n_total: int = 4000
    frequency_classes: Tuple[FrequencyClass, ...] = DEFAULT_FREQUENCY_CLASSES
    effect_scheme: EffectScheme = 'ramp'
    scenarios: Tuple[Scenario, ...] = DEFAULT_SCENARIOS
    alpha: float = 0.05
    fdr_threshold: float = 0.5
    replicates: int = 1000
    seed: Optional[int] = 2024

    def __post_init__(self):
        object.__setattr__(self, 'frequency_classes', tuple(self.frequency_classes))
        object.__setattr__(self, 'scenarios', tuple(self.scenarios))
        if not isinstance(self.effect_scheme, str):
            object.__setattr__(self, 'effect_scheme', tuple(float(b) for b in self.effect_scheme))

    def validate(self) -> None:
        """Check every parameter; raises ConfigurationError on the first violation"""
        if int(self.replicates) != self.replicates or self.replicates <= 0:
            raise ConfigurationError("replicates", f"must be a positive integer, got {self.replicates}")
        if self.seed is not None and (int(self.seed) != self.seed or self.seed < 0):
            raise ConfigurationError("seed", f"must be a non-negative integer, got {self.seed}")
        validate_thresholds(self.alpha, self.fdr_threshold)
        validate_scenarios(self.scenarios)
        architecture = self.build_architecture()
        for scenario in self.scenarios:
            scenario.residual_variance(architecture)

    def build_architecture(self) -> GeneticArchitecture:
        return build_architecture(
            self.frequency_classes,
            n_causal=self.n_causal,
            n_total=self.n_total,
            effect_scheme=self.effect_scheme,
        )

    def with_overrides(self, **overrides: Any) -> "PowerConfig":
        """Return a copy with the non-None overrides applied"""
        updates = {key: value for key, value in overrides.items() if value is not None}
        unknown = set(updates) - set(CONFIG_KEYS)
        if unknown:
            raise ConfigurationError("config", f"unknown keys: {', '.join(sorted(unknown))}")
        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if not isinstance(self.effect_scheme, str):
            data['effect_scheme'] = list(self.effect_scheme)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PowerConfig":
        if not isinstance(data, dict):
            raise ConfigurationError("config", f"expected a mapping, got {type(data).__name__}")
        unknown = set(data) - set(CONFIG_KEYS)
        if unknown:
            raise ConfigurationError("config", f"unknown keys: {', '.join(sorted(unknown))}")

        kwargs: Dict[str, Any] = {key: data[key] for key in CONFIG_KEYS if key in data}
        for key, kind in NUMERIC_FIELDS.items():
            if key in kwargs:
                kwargs[key] = _parse_number(kwargs[key], key, kind, nullable=key in NULLABLE_FIELDS)
        if 'effect_scheme' in kwargs:
            kwargs['effect_scheme'] = _parse_effect_scheme(kwargs['effect_scheme'])
        if 'frequency_classes' in kwargs:
            kwargs['frequency_classes'] = _parse_records(
                kwargs['frequency_classes'], FrequencyClass, 'frequency_classes'
            )
        if 'scenarios' in kwargs:
            kwargs['scenarios'] = _parse_records(kwargs['scenarios'], Scenario, 'scenarios')
        return cls(**kwargs)


def _parse_number(value: Any, parameter: str, kind: type, nullable: bool = False) -> Any:
    """Check a document value is a JSON number and convert it to int or float"""
    if value is None and nullable:
        return None
    # bool is an int subclass but never a valid count or rate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(parameter, f"expected a number, got {value!r}")
    if kind is int:
        if not float(value).is_integer():
            raise ConfigurationError(parameter, f"expected an integer, got {value!r}")
        return int(value)
    return float(value)


def _parse_effect_scheme(value: Any) -> EffectScheme:
    if isinstance(value, str):
        return value
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(
            "effect_scheme", f"expected a scheme name or a list of effects, got {value!r}"
        )
    return tuple(_parse_number(b, "effect_scheme", float) for b in value)


def _parse_records(records: Sequence[Any], record_type: type, parameter: str) -> List[Any]:
    if not isinstance(records, (list, tuple)):
        raise ConfigurationError(parameter, "must be a list of objects")
    numeric_fields = RECORD_NUMERIC_FIELDS[record_type]
    parsed = []
    for index, record in enumerate(records):
        if isinstance(record, record_type):
            parsed.append(record)
            continue
        if not isinstance(record, dict):
            raise ConfigurationError(parameter, f"entries must be objects, got {record!r}")

        record = dict(record)
        if 'name' in record and not isinstance(record['name'], str):
            raise ConfigurationError(f"{parameter}[{index}].name", f"expected a string, got {record['name']!r}")
        for key, kind in numeric_fields.items():
            if key in record:
                record[key] = _parse_number(
                    record[key], f"{parameter}[{index}].{key}", kind, nullable=key in NULLABLE_FIELDS
                )
        try:
            parsed.append(record_type(**record))
        except TypeError as e:
            raise ConfigurationError(parameter, str(e)) from e
    return parsed


def default_config() -> PowerConfig:
    """Reference two-scenario study"""
    return PowerConfig()


def load_config(path: Union[str, Path]) -> PowerConfig:
    """Read a PowerConfig from a JSON file"""
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError("config", f"{path} is not valid JSON: {e}") from e
    return PowerConfig.from_dict(data)

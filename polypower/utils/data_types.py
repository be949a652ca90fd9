"""
Core data structures for polypower package
"""

from dataclasses import dataclass, field, asdict
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

RESULT_COLUMNS: Tuple[str, ...] = (
    'minp',
    'maxp',
    'bonf_true',
    'fdr_detect',
    'fdr_true',
    'h2',
    'dataset',
)


class ConfigurationError(ValueError):
    """Invalid simulation parameter, raised before any simulation work"""

    def __init__(self, parameter: str, message: str):
        self.parameter = parameter
        super().__init__(f"Invalid {parameter}: {message}")


@dataclass(frozen=True)
class FrequencyClass:
    """Group of causal loci sharing one minor allele frequency

    n_loci=None takes an even share of the loci not claimed by other classes.
    """

    name: str
    frequency: float
    n_loci: Optional[int] = None


@dataclass(frozen=True, eq=False)
class GeneticArchitecture:
    """Causal loci of the additive model

    Attributes:
        frequencies: Minor allele frequency per causal locus
        effects: Effect size per causal locus
        n_total: Number of tested loci (N), causal plus null
        class_labels: Frequency class name per causal locus
    """

    frequencies: np.ndarray
    effects: np.ndarray
    n_total: int
    class_labels: Tuple[str, ...] = ()

    def __post_init__(self):
        freqs = np.array(self.frequencies, dtype=np.float64)
        effects = np.array(self.effects, dtype=np.float64)
        if freqs.ndim != 1 or freqs.shape != effects.shape:
            raise ConfigurationError(
                "architecture",
                f"frequencies {freqs.shape} and effects {effects.shape} must be 1D and equal length",
            )
        freqs.setflags(write=False)
        effects.setflags(write=False)
        object.__setattr__(self, 'frequencies', freqs)
        object.__setattr__(self, 'effects', effects)
        object.__setattr__(self, 'class_labels', tuple(self.class_labels))

    @property
    def n_causal(self) -> int:
        """Number of causal loci (n)"""
        return int(self.frequencies.shape[0])

    @property
    def genetic_variance(self) -> float:
        """vg = sum(beta^2 * f * (1 - f))"""
        f = self.frequencies
        return float(np.sum(self.effects ** 2 * f * (1.0 - f)))

    def noise_variance(self, heritability: float) -> float:
        """Residual variance giving the requested heritability"""
        _check_heritability(heritability)
        return (1.0 - heritability) / heritability * self.genetic_variance

    def total_variance(self, heritability: float) -> float:
        return self.genetic_variance + self.noise_variance(heritability)

    def expected_carriers(self, cohort_size: int) -> np.ndarray:
        """Expected number of minor-allele carriers per locus in a cohort"""
        return cohort_size * self.frequencies


def _check_heritability(heritability: float) -> None:
    if not (0.0 < heritability < 1.0):
        raise ConfigurationError(
            "heritability", f"must lie in the open interval (0, 1), got {heritability}"
        )


@dataclass(frozen=True)
class Scenario:
    """One cohort design evaluated by the replicate pipeline

    noise_variance overrides the heritability-derived residual variance
    (used for null calibration where every effect is zero).
    """

    name: str
    cohort_size: int
    heritability: float
    noise_variance: Optional[float] = None

    def validate(self) -> None:
        if not self.name:
            raise ConfigurationError("scenario name", "must be a non-empty string")
        if int(self.cohort_size) != self.cohort_size or self.cohort_size <= 0:
            raise ConfigurationError(
                "cohort_size", f"scenario '{self.name}' needs a positive integer, got {self.cohort_size}"
            )
        _check_heritability(self.heritability)
        if self.noise_variance is not None and self.noise_variance < 0:
            raise ConfigurationError(
                "noise_variance", f"scenario '{self.name}' needs a non-negative value, got {self.noise_variance}"
            )

    def residual_variance(self, architecture: GeneticArchitecture) -> float:
        if self.noise_variance is not None:
            return float(self.noise_variance)
        return architecture.noise_variance(self.heritability)


@dataclass(frozen=True, eq=False)
class PhenotypeDraw:
    """Genetic signal, noise and their sum for one simulated cohort"""

    genetic: np.ndarray
    noise: np.ndarray
    phenotype: np.ndarray


@dataclass(frozen=True)
class DetectionCounts:
    bonf_true: int
    fdr_detect: int
    fdr_true: int


@dataclass(frozen=True)
class DetectionSummary:
    """Single output row for one replicate"""

    minp: float
    maxp: float
    bonf_true: int
    fdr_detect: int
    fdr_true: int
    h2: float

    def to_row(self, dataset: str) -> dict:
        row = asdict(self)
        row['dataset'] = dataset
        return row


@dataclass(frozen=True)
class ReplicateTable:
    """Container for the replicate summaries of one scenario"""

    dataset: str
    entries: Tuple[DetectionSummary, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'entries', tuple(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def column(self, name: str) -> np.ndarray:
        return np.array([getattr(entry, name) for entry in self.entries])

    def to_dataframe(self) -> pd.DataFrame:
        rows = [entry.to_row(self.dataset) for entry in self.entries]
        if not rows:
            return pd.DataFrame(columns=list(RESULT_COLUMNS))
        return pd.DataFrame(rows, columns=list(RESULT_COLUMNS))


def concat_tables(tables: Iterable[ReplicateTable]) -> pd.DataFrame:
    """Stack scenario tables into the results table handed to reporting"""
    frames: List[pd.DataFrame] = [table.to_dataframe() for table in tables]
    if not frames:
        return pd.DataFrame(columns=list(RESULT_COLUMNS))
    return pd.concat(frames, ignore_index=True)


def validate_scenarios(scenarios: Sequence[Scenario]) -> None:
    if len(scenarios) == 0:
        raise ConfigurationError("scenarios", "at least one scenario is required")
    names = [scenario.name for scenario in scenarios]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ConfigurationError("scenarios", f"duplicate scenario names: {', '.join(duplicates)}")
    for scenario in scenarios:
        scenario.validate()

import numpy as np
import pytest

from polypower.simulation.cohort import simulate_genotypes
from polypower.simulation.phenotype import synthesize_phenotype
from polypower.utils.data_types import ConfigurationError


def test_simulate_genotypes_shape_and_values() -> None:
    rng = np.random.default_rng(0)
    freqs = np.array([0.02, 0.1, 0.3])

    geno = simulate_genotypes(freqs, 407, rng)

    assert geno.shape == (407, 3)
    assert geno.dtype == np.int8
    assert set(np.unique(geno)).issubset({0, 1})


def test_simulate_genotypes_matches_frequencies() -> None:
    rng = np.random.default_rng(1)
    freqs = np.array([0.05, 0.25, 0.5])
    n = 20000

    geno = simulate_genotypes(freqs, n, rng)

    observed = geno.mean(axis=0)
    tolerance = 4 * np.sqrt(freqs * (1 - freqs) / n)
    assert np.all(np.abs(observed - freqs) < tolerance)


def test_simulate_genotypes_loci_are_independent() -> None:
    rng = np.random.default_rng(2)

    geno = simulate_genotypes(np.full(4, 0.3), 20000, rng).astype(float)

    corr = np.corrcoef(geno, rowvar=False)
    off_diag = corr[~np.eye(4, dtype=bool)]
    assert np.max(np.abs(off_diag)) < 0.05


def test_simulate_genotypes_uses_only_passed_generator() -> None:
    freqs = np.array([0.1, 0.4])

    np.random.seed(0)
    first = simulate_genotypes(freqs, 50, np.random.default_rng(5))
    np.random.seed(1)
    second = simulate_genotypes(freqs, 50, np.random.default_rng(5))

    np.testing.assert_array_equal(first, second)


def test_simulate_genotypes_rejects_empty_cohort() -> None:
    with pytest.raises(ConfigurationError):
        simulate_genotypes(np.array([0.1]), 0, np.random.default_rng(0))


def test_synthesize_phenotype_is_additive() -> None:
    rng = np.random.default_rng(3)
    geno = np.array([[0, 1], [1, 1], [1, 0], [0, 0]], dtype=np.int8)
    effects = np.array([2.0, -1.0])

    draw = synthesize_phenotype(geno, effects, 0.5, rng)

    np.testing.assert_allclose(draw.genetic, [-1.0, 1.0, 2.0, 0.0])
    np.testing.assert_allclose(draw.phenotype, draw.genetic + draw.noise)
    assert draw.phenotype.shape == (4,)


def test_synthesize_phenotype_noise_scale() -> None:
    rng = np.random.default_rng(4)
    geno = np.zeros((50000, 1), dtype=np.int8)

    draw = synthesize_phenotype(geno, np.array([1.0]), 3.0, rng)

    assert np.std(draw.noise) == pytest.approx(3.0, rel=0.02)
    assert np.mean(draw.noise) == pytest.approx(0.0, abs=0.05)


def test_synthesize_phenotype_without_noise() -> None:
    geno = np.array([[1], [0], [1]], dtype=np.int8)

    draw = synthesize_phenotype(geno, np.array([1.5]), 0.0, np.random.default_rng(0))

    np.testing.assert_array_equal(draw.noise, np.zeros(3))
    np.testing.assert_allclose(draw.phenotype, [1.5, 0.0, 1.5])


def test_synthesize_phenotype_validates_inputs() -> None:
    geno = np.zeros((3, 2), dtype=np.int8)
    rng = np.random.default_rng(0)

    with pytest.raises(ValueError):
        synthesize_phenotype(geno, np.array([1.0]), 1.0, rng)
    with pytest.raises(ValueError):
        synthesize_phenotype(geno, np.array([1.0, 1.0]), -1.0, rng)

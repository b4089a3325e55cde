"""
Gaussian mixture tests.

Verifies:
- Component likelihood and mixture log-likelihood
- Closed-form intersection of two weighted Gaussians
- EM updates keep weights normalised and handle empty components
- Pruning, silence marking and region emission
"""

import logging
import math

import numpy as np
import pytest

from pysyllabifier.analysis.gmm import (
    GMMComponent,
    energy_from_intensity,
    fit_components,
    initialize_components,
    intersection,
    is_overlapping,
    log_likelihood,
    mark_silence,
    prune_overlapping,
    regions_from_components,
    responsibilities,
    update_components,
)


def component(mean, variance=1.0, weight=1.0, n=1.0):
    return GMMComponent(mean=mean, variance=variance, weight=weight, n=n)


class TestLikelihood:
    """Gaussian pdf and mixture log-likelihood."""

    def test_pdf_at_mean(self):
        c = component(0.5, variance=0.04)
        assert c.likelihood(0.5) == pytest.approx(1 / math.sqrt(2 * math.pi * 0.04))

    def test_vectorised(self):
        c = component(0.0)
        values = c.likelihood(np.array([-1.0, 0.0, 1.0]))
        assert values.shape == (3,)
        assert values[0] == pytest.approx(values[2])

    def test_zero_variance_explains_nothing(self):
        assert component(0.0, variance=0.0).likelihood(0.0) == 0.0

    def test_single_point_log_likelihood(self):
        """One sample under one unit-weight component gives log(pdf)."""
        c = component(0.3, variance=0.01)
        times = np.array([0.35])
        energy = np.array([5.0])
        assert log_likelihood([c], times, energy) == pytest.approx(math.log(c.likelihood(0.35)))

    def test_mass(self):
        assert GMMComponent(mean=0.0, variance=1.0, weight=0.25, n=8.0).mass == pytest.approx(2.0)


class TestIntersection:
    """Crossing point of two weighted Gaussians."""

    def test_equal_variance_equal_weight_is_midpoint(self):
        assert intersection(component(0.0), component(4.0)) == pytest.approx(2.0)

    def test_unequal_variance(self):
        x = intersection(component(0.0, 1.0), component(4.0, 0.5))
        assert x == pytest.approx(2.28220784038, abs=1e-9)

    def test_equal_variance_unequal_weight(self):
        x = intersection(component(0.0, 1.0, 1.0), component(4.0, 1.0, 2.0))
        assert x == pytest.approx(1.82671320486, abs=1e-9)

    def test_unequal_variance_unequal_weight(self):
        x = intersection(component(0.0, 1.0, 1.0), component(4.0, 2.0, 2.0))
        assert x == pytest.approx(1.53296535674, abs=1e-9)

    def test_identical_components_meet_at_shared_mean(self):
        assert intersection(component(0.5, 0.01, 0.5), component(0.5, 0.01, 0.5)) == pytest.approx(0.5)

    def test_argument_order_does_not_matter(self):
        a, b = component(0.0, 1.0, 1.0), component(4.0, 2.0, 2.0)
        assert intersection(a, b) == pytest.approx(intersection(b, a))

    def test_no_root_between_means_is_nan(self):
        assert math.isnan(intersection(component(0.0, 1.0), component(0.1, 2.0)))

    def test_zero_weight_is_nan(self):
        assert math.isnan(intersection(component(0.0, weight=0.0), component(1.0)))

    def test_uses_mass_when_requested(self):
        """Mass weighting pulls the crossing toward the lighter component."""
        light = GMMComponent(mean=0.0, variance=1.0, weight=0.5, n=1.0)
        heavy = GMMComponent(mean=4.0, variance=1.0, weight=0.5, n=4.0)
        assert intersection(light, heavy) == pytest.approx(2.0)
        assert intersection(light, heavy, use_mass=True) < 2.0


class TestEM:
    """Initialisation, E-step and M-step."""

    def test_one_seed_per_step(self):
        components = initialize_components(0.3)
        assert len(components) == 3
        assert [c.mean for c in components] == pytest.approx([0.05, 0.15, 0.25])
        assert sum(c.weight for c in components) == pytest.approx(1.0)
        assert all(c.variance == pytest.approx(0.0025) for c in components)

    def test_too_short_has_no_seeds(self):
        assert initialize_components(0.05) == []

    def test_weights_sum_to_one_after_update(self):
        rng = np.random.default_rng(1)
        times = np.linspace(0.0, 1.0, 101)
        energy = rng.uniform(0.0, 5.0, size=times.size)
        components = initialize_components(1.0)
        tau = responsibilities(components, times, energy)
        update_components(components, times, tau)
        assert sum(c.weight for c in components) == pytest.approx(1.0)
        assert all(c.variance >= 0 for c in components)
        assert all(c.n >= 0 for c in components)

    def test_responsibilities_sum_to_energy(self):
        times = np.linspace(0.0, 0.5, 51)
        energy = np.linspace(1.0, 2.0, 51)
        tau = responsibilities(initialize_components(0.5), times, energy)
        np.testing.assert_allclose(tau.sum(axis=0), energy)

    def test_zero_responsibility_component_defaults_mean(self):
        """A component that explains no energy gets mean 0 and zero variance."""
        times = np.array([0.1, 0.2])
        energy = np.array([1.0, 1.0])
        components = [component(0.15, 0.01, 0.5), component(0.9, 0.01, 0.5)]
        tau = np.array([[1.0, 1.0], [0.0, 0.0]])
        update_components(components, times, tau)
        assert components[1].mean == 0.0
        assert components[1].variance == 0.0
        assert components[1].weight == 0.0
        assert components[0].weight == pytest.approx(1.0)
        assert components[0].mean == pytest.approx(0.15)

    def test_fit_converges_on_single_bump(self):
        times = np.arange(0.0, 1.0, 0.01)
        energy = np.exp(-((times - 0.5) ** 2) / (2 * 0.05**2))
        components = [component(0.4, 0.0025, 1.0)]
        iterations = fit_components(components, times, energy)
        assert iterations < 100
        assert components[0].mean == pytest.approx(0.5, abs=1e-3)
        assert components[0].std == pytest.approx(0.05, abs=2e-3)

    def test_iteration_cap_warns(self, caplog):
        times = np.arange(0.0, 1.0, 0.01)
        energy = np.ones_like(times)
        with caplog.at_level(logging.WARNING):
            iterations = fit_components(initialize_components(1.0), times, energy, tolerance=0.0, max_iterations=3)
        assert iterations == 3
        assert any("did not converge" in r.getMessage() for r in caplog.records)

    def test_energy_transform(self):
        np.testing.assert_allclose(energy_from_intensity(np.array([10.0, 20.0])), [1.0, 1024.0])

    def test_energy_floor_silences_negative_db(self):
        np.testing.assert_array_equal(energy_from_intensity(np.array([-300.0, -5.0])), [0.0, 0.0])


class TestPruning:
    """Removal of overlapping neighbours."""

    @pytest.fixture
    def crowded(self):
        return [
            GMMComponent(mean=0.10, variance=0.0025, weight=0.2, n=10.0),
            GMMComponent(mean=0.11, variance=0.0025, weight=0.3, n=20.0),
            GMMComponent(mean=0.50, variance=0.0025, weight=0.2, n=10.0),
            GMMComponent(mean=0.52, variance=0.0030, weight=0.1, n=1.0),
            GMMComponent(mean=0.90, variance=0.0025, weight=0.2, n=10.0),
        ]

    def test_never_grows(self, crowded):
        assert len(prune_overlapping(crowded)) <= len(crowded)

    def test_no_adjacent_overlap_remains(self, crowded):
        pruned = prune_overlapping(crowded)
        for left, right in zip(pruned, pruned[1:]):
            assert not is_overlapping(left, right)

    def test_is_fixed_point(self, crowded):
        pruned = prune_overlapping(crowded)
        assert prune_overlapping(pruned) == pruned

    def test_keeps_heavier_of_each_pair(self, crowded):
        means = [c.mean for c in prune_overlapping(crowded)]
        assert means == [0.11, 0.50, 0.90]

    def test_result_is_mean_ordered(self):
        shuffled = [
            GMMComponent(mean=0.9, variance=0.0025, weight=0.5, n=1.0),
            GMMComponent(mean=0.1, variance=0.0025, weight=0.5, n=1.0),
        ]
        assert [c.mean for c in prune_overlapping(shuffled)] == [0.1, 0.9]

    def test_empty_components_are_removed(self):
        """Zero-mass components have no defined intersection and lose every comparison."""
        components = [
            GMMComponent(mean=0.0, variance=0.0, weight=0.0, n=0.0),
            GMMComponent(mean=0.3, variance=0.0025, weight=1.0, n=5.0),
        ]
        pruned = prune_overlapping(components)
        assert len(pruned) == 1
        assert pruned[0].mean == 0.3


class TestSilence:
    """Marking of low-mass components."""

    def test_masses_100_1_50(self):
        components = [component(0.1, n=100.0), component(0.2, n=1.0), component(0.3, n=50.0)]
        mark_silence(components)
        assert [c.is_silence for c in components] == [False, True, False]

    def test_threshold_is_inclusive(self):
        components = [component(0.1, n=100.0), component(0.2, n=1.0), component(0.3, n=1.5)]
        mark_silence(components, ratio=0.01)
        assert [c.is_silence for c in components] == [False, True, False]

    def test_empty_list(self):
        mark_silence([])


class TestRegionEmission:
    """Regions bounded by neighbour intersections."""

    def test_regions_are_ordered_and_disjoint(self):
        components = [
            GMMComponent(mean=0.15, variance=0.002, weight=0.4, n=4.0),
            GMMComponent(mean=0.45, variance=0.001, weight=0.2, n=2.0),
            GMMComponent(mean=0.80, variance=0.003, weight=0.4, n=4.0),
        ]
        regions = regions_from_components(components, 1.0)
        assert len(regions) == 3
        assert regions[0].start == 0.0
        assert regions[-1].end == 1.0
        for a, b in zip(regions, regions[1:]):
            assert a.end <= b.start
            assert a.start < a.end

    def test_silent_components_are_skipped(self):
        components = [component(0.2, 0.01, 0.5), component(0.6, 0.01, 0.5)]
        components[0].is_silence = True
        regions = regions_from_components(components, 1.0)
        assert len(regions) == 1
        assert regions[0].start == pytest.approx(0.4)
        assert regions[0].end == 1.0

    def test_undefined_intersection_uses_midpoint(self):
        components = [component(0.0, 1.0), component(0.1, 2.0)]
        regions = regions_from_components(components, 1.0)
        assert regions[0].end == pytest.approx(0.05)
        assert regions[1].start == pytest.approx(0.05)

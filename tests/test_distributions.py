"""Unit tests for the arrival, service-time and priority generators."""

import math
import random

import pytest

from simcore.distributions import (
    build_poisson_table,
    generate_arrivals,
    generate_priorities,
    generate_service_times,
    lookup_interval,
    sample_exponential_service,
    sample_normal_service,
    sample_uniform_service,
)
from simcore.models import DistributionSpec


class ScriptedRandom:
    """Returns pre-set uniform draws in order."""

    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)

    def choice(self, seq):
        return seq[0]


@pytest.mark.parametrize("lam", [0.5, 1.0, 3.0, 7.5, 20.0])
def test_poisson_table_is_monotone_and_ends_at_one(lam):
    table = build_poisson_table(lam)
    assert all(a <= b for a, b in zip(table.cp, table.cp[1:]))
    assert table.cp[-1] == 1.0
    assert table.cp_lookup[0] == 0.0
    assert table.cp_lookup[1:] == table.cp[:-1]
    assert table.no_between_arrivals == list(range(len(table.cp)))


def test_poisson_table_first_entry_is_rounded_pmf_at_zero():
    table = build_poisson_table(3.0)
    assert table.cp[0] == 0.04979  # e^-3 = 0.049787...
    assert math.isclose(table.cp[1], 0.19915)  # e^-3 * (1 + 3)


def test_poisson_table_caps_terms():
    table = build_poisson_table(2000.0)  # e^-2000 underflows, cumulative never reaches the threshold
    assert len(table.cp) == 501
    assert table.cp[-1] == 1.0


def test_lookup_interval_boundaries():
    table = build_poisson_table(3.0)
    assert lookup_interval(table, 0.0) == 0
    assert lookup_interval(table, table.cp[0]) == 0
    assert lookup_interval(table, table.cp[0] + 1e-9) == 1
    assert lookup_interval(table, table.cp[2]) == 2
    assert lookup_interval(table, 0.999999999) == len(table.cp) - 1


def test_lookup_interval_matches_linear_scan():
    table = build_poisson_table(4.2)
    rng = random.Random(5)
    for _ in range(500):
        r = rng.random()
        expected = next(
            (i for i in range(len(table.cp)) if table.cp_lookup[i] <= r <= table.cp[i]),
            len(table.cp) - 1,
        )
        assert lookup_interval(table, r) == expected


def test_arrivals_start_at_zero_and_accumulate():
    arrivals = generate_arrivals(3.0, random.Random(11))
    table = build_poisson_table(3.0)
    assert len(arrivals) == len(table.cp)
    assert arrivals[0].inter_arrival == 0
    assert arrivals[0].arrival_time == 0
    total = 0
    for i, rec in enumerate(arrivals):
        total += rec.inter_arrival
        assert rec.index == i + 1
        assert rec.arrival_time == total
        assert rec.inter_arrival >= 0
        assert rec.cp == table.cp[i]
    times = [r.arrival_time for r in arrivals]
    assert times == sorted(times)


def test_arrival_gaps_follow_the_draws():
    table = build_poisson_table(1.0)
    draws = [0.0] + [table.cp[1]] * (len(table.cp) - 2)
    arrivals = generate_arrivals(1.0, ScriptedRandom(draws))
    assert [a.inter_arrival for a in arrivals] == [0, 0] + [1] * (len(table.cp) - 2)


def test_exponential_service():
    assert sample_exponential_service(5.0, ScriptedRandom([0.5])) == 4  # ceil(5 ln 2)
    # U = 1 gives zero work, floored to one unit
    assert sample_exponential_service(5.0, ScriptedRandom([0.0])) == 1


def test_uniform_service():
    assert sample_uniform_service(2.0, 6.0, ScriptedRandom([0.5])) == 4
    assert sample_uniform_service(2.0, 6.0, ScriptedRandom([0.01])) == 3
    assert sample_uniform_service(0.0, 0.5, ScriptedRandom([0.0])) == 1


def test_normal_service_box_muller():
    u1 = math.exp(-0.5)  # sqrt(-2 ln u1) == 1
    assert sample_normal_service(10.0, 2.0, ScriptedRandom([u1, 0.5])) == 8
    assert sample_normal_service(1.0, 5.0, ScriptedRandom([u1, 0.5])) == 1


def test_normal_service_replaces_zero_draw():
    # u1 = 0 is replaced by 0.0001: sqrt(-2 ln 1e-4) = 4.29...
    assert sample_normal_service(0.0, 1.0, ScriptedRandom([0.0, 0.0])) == 5


@pytest.mark.parametrize("spec", [
    DistributionSpec("exponential", {"mean": 3.0}),
    DistributionSpec("uniform", {"min": 1.0, "max": 4.0}),
    DistributionSpec("normal", {"mean": 3.0, "std": 2.0}),
])
def test_service_times_are_positive_integers(spec):
    times = generate_service_times(spec, 200, random.Random(3))
    assert len(times) == 200
    assert all(isinstance(t, int) and t >= 1 for t in times)


def test_service_times_reject_bad_specs():
    with pytest.raises(ValueError):
        generate_service_times(DistributionSpec("gamma", {"shape": 2.0}), 3, random.Random(0))
    with pytest.raises(ValueError):
        generate_service_times(DistributionSpec("uniform", {"min": 1.0}), 3, random.Random(0))


def test_priorities_cover_three_classes():
    prios = generate_priorities(300, random.Random(1))
    assert set(prios) == {1, 2, 3}

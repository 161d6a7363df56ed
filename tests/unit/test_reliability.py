"""
Unit tests for the reliability model
"""

import unittest
import pytest
from matrix_calculator.calculation_params import ReliabilityParams
from matrix_calculator.reliability import (
    MINUTES_PER_YEAR,
    REDUNDANCY_PROFILES,
    calculate_reliability,
    classify_tier,
    component_availability,
    redundancy_capacity_factor,
)
from matrix_calculator.selectors import RedundancyMode


class TestComponentAvailability(unittest.TestCase):
    """Test MTBF/MTTR availability"""

    def test_formula(self):
        self.assertAlmostEqual(component_availability(250000, 4), 250000 / 250004)

    def test_no_repair_time(self):
        self.assertEqual(component_availability(1000, 0), 1.0)


class TestTierClassification(unittest.TestCase):
    """Test Uptime tier thresholds (strictly greater than)"""

    def test_thresholds(self):
        self.assertEqual(classify_tier(0.99995), "Tier IV")
        self.assertEqual(classify_tier(0.9999), "Tier III")
        self.assertEqual(classify_tier(0.9995), "Tier III")
        self.assertEqual(classify_tier(0.999), "Tier II")
        self.assertEqual(classify_tier(0.995), "Tier II")
        self.assertEqual(classify_tier(0.99), "Tier I")
        self.assertEqual(classify_tier(0.5), "Tier I")


class TestRedundancyCapacityFactor(unittest.TestCase):
    """Test installed capacity multipliers"""

    def test_table(self):
        self.assertEqual(redundancy_capacity_factor(RedundancyMode.N), 1.0)
        self.assertEqual(redundancy_capacity_factor(RedundancyMode.N_PLUS_1), 1.2)
        self.assertEqual(redundancy_capacity_factor(RedundancyMode.TWO_N), 2.0)
        self.assertEqual(redundancy_capacity_factor(RedundancyMode.TWO_N_PLUS_1), 2.2)
        self.assertEqual(redundancy_capacity_factor(RedundancyMode.THREE_N), 3.0)

    def test_string_modes(self):
        self.assertEqual(redundancy_capacity_factor("2n"), 2.0)

    def test_unknown_mode(self):
        self.assertEqual(redundancy_capacity_factor("4N+2"), 1.5)


class TestCalculateReliability:
    """Test system availability"""

    @pytest.fixture
    def params(self):
        return ReliabilityParams()

    def test_n_plus_1(self, params):
        result = calculate_reliability(RedundancyMode.N_PLUS_1, False, params)
        ups = 250000 / 250004
        cooling = 200000 / 200008
        assert result.ups_availability == pytest.approx(ups)
        assert result.cooling_availability == pytest.approx(cooling)
        assert result.generator_availability is None
        assert result.power_availability == pytest.approx(ups)
        assert result.system_availability == pytest.approx(ups * cooling * 0.995)
        assert result.tier == "Tier II"
        assert result.redundancy_description == REDUNDANCY_PROFILES[RedundancyMode.N_PLUS_1].description

    @pytest.mark.parametrize("mode,tier", [
        (RedundancyMode.N, "Tier I"),
        (RedundancyMode.N_PLUS_1, "Tier II"),
        (RedundancyMode.TWO_N, "Tier III"),
        (RedundancyMode.TWO_N_PLUS_1, "Tier III"),
        (RedundancyMode.THREE_N, "Tier IV"),
    ])
    def test_tiers(self, params, mode, tier):
        assert calculate_reliability(mode, False, params).tier == tier

    def test_redundancy_ordering(self, params):
        modes = [RedundancyMode.N, RedundancyMode.N_PLUS_1, RedundancyMode.TWO_N,
                 RedundancyMode.TWO_N_PLUS_1, RedundancyMode.THREE_N]
        availability = [calculate_reliability(m, False, params).system_availability for m in modes]
        assert availability == sorted(availability)

    def test_generator_improves_power_availability(self, params):
        without = calculate_reliability(RedundancyMode.TWO_N, False, params)
        with_gen = calculate_reliability(RedundancyMode.TWO_N, True, params)
        assert with_gen.generator_availability == pytest.approx(175000 / 175006)
        assert with_gen.power_availability > without.power_availability
        assert with_gen.system_availability > without.system_availability

    def test_downtime(self, params):
        result = calculate_reliability(RedundancyMode.N, False, params)
        expected = (1 - result.system_availability) * MINUTES_PER_YEAR
        assert result.annual_downtime_minutes == pytest.approx(expected, abs=0.05)
        assert result.availability_percentage == pytest.approx(result.system_availability * 100, abs=1e-4)


if __name__ == '__main__':
    unittest.main()

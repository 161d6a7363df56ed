"""
Unit tests for low-voltage distribution sizing
"""

import unittest
import pytest
from matrix_calculator.calculation_params import ElectricalParams
from matrix_calculator.electrical import (
    RACKS_PER_ROW,
    select_busbar,
    select_rpdu,
    select_tap_off_box,
    size_electrical,
    three_phase_current,
)
from matrix_calculator.selectors import BUSBAR_RATINGS_A, RPDUSize, TapOffBox


class TestThreePhaseCurrent(unittest.TestCase):
    """Test line current calculation"""

    def test_default_feed(self):
        """10 kW at 400 V, PF 0.9"""
        current = three_phase_current(10, ElectricalParams())
        self.assertAlmostEqual(current, 16.04, places=2)

    def test_higher_power_factor_draws_less(self):
        base = three_phase_current(100, ElectricalParams())
        improved = three_phase_current(100, ElectricalParams(powerFactor=1.0))
        self.assertLess(improved, base)

    def test_scales_linearly(self):
        params = ElectricalParams()
        self.assertAlmostEqual(three_phase_current(20, params), 2 * three_phase_current(10, params))


class TestSelectors(unittest.TestCase):
    """Test busbar, tap-off box and rPDU brackets"""

    def test_busbar_exact_rating(self):
        self.assertEqual(select_busbar(250), 250)

    def test_busbar_rounds_up(self):
        self.assertEqual(select_busbar(251), 400)
        self.assertEqual(select_busbar(1684), 2000)

    def test_busbar_capped_at_largest(self):
        self.assertEqual(select_busbar(5000), 2000)

    def test_busbar_always_standard_rating(self):
        for current in range(0, 2600, 37):
            self.assertIn(select_busbar(current), BUSBAR_RATINGS_A)

    def test_tap_off_brackets(self):
        self.assertEqual(select_tap_off_box(16), TapOffBox.STANDARD_63A)
        self.assertEqual(select_tap_off_box(63), TapOffBox.STANDARD_63A)
        self.assertEqual(select_tap_off_box(64), TapOffBox.CUSTOM_100A)
        self.assertEqual(select_tap_off_box(120), TapOffBox.CUSTOM_150A)
        self.assertEqual(select_tap_off_box(160), TapOffBox.CUSTOM_200A)
        self.assertEqual(select_tap_off_box(321), TapOffBox.CUSTOM_250A)

    def test_rpdu_brackets(self):
        self.assertEqual(select_rpdu(80), RPDUSize.STANDARD_80A)
        self.assertEqual(select_rpdu(81), RPDUSize.STANDARD_112A)


class TestSizeElectrical(unittest.TestCase):
    """Test row distribution sizing"""

    def setUp(self):
        self.params = ElectricalParams()

    def test_low_density_row(self):
        """10 kW racks, 14 per row"""
        result = size_electrical(10, self.params)
        self.assertEqual(result.current_per_row_a, 225)
        self.assertEqual(result.current_per_rack_a, 16)
        self.assertEqual(result.busbar_size_a, 250)
        self.assertEqual(result.busbars_per_row, 1)
        self.assertEqual(result.tap_off_box, TapOffBox.STANDARD_63A)
        self.assertEqual(result.rpdu, RPDUSize.STANDARD_80A)
        self.assertIsNone(result.multiplicity_warning)

    def test_high_density_row(self):
        result = size_electrical(75, self.params)
        self.assertEqual(result.current_per_rack_a, 120)
        self.assertEqual(result.busbar_size_a, 2000)
        self.assertEqual(result.tap_off_box, TapOffBox.CUSTOM_150A)
        self.assertEqual(result.rpdu, RPDUSize.STANDARD_112A)

    def test_row_beyond_largest_busbar(self):
        """Row current above 2000 A needs several busbars"""
        result = size_electrical(100, self.params)
        self.assertGreater(result.current_per_row_a, 2000)
        self.assertEqual(result.busbar_size_a, 2000)
        self.assertEqual(result.busbars_per_row, 2)
        self.assertIsNotNone(result.multiplicity_warning)

    def test_configured_busbars_per_row_is_minimum(self):
        result = size_electrical(10, ElectricalParams(busbarsPerRow=2))
        self.assertEqual(result.busbars_per_row, 2)

    def test_row_current_is_fourteen_racks(self):
        result = size_electrical(40, self.params)
        expected = three_phase_current(40 * RACKS_PER_ROW, self.params)
        self.assertAlmostEqual(result.current_per_row_a, expected, delta=0.5)


@pytest.mark.parametrize("low,high", [(5, 10), (10, 30), (30, 75), (75, 100), (100, 250)])
def test_busbar_monotonic_in_density(low, high):
    params = ElectricalParams()
    assert size_electrical(high, params).busbar_size_a >= size_electrical(low, params).busbar_size_a


if __name__ == '__main__':
    unittest.main()

"""
Unit tests for Economics module (cost rollup, sustainability, carbon and TCO)
"""

import unittest
import numpy as np
import pytest
from matrix_calculator.calculation_params import (
    CalculationParams,
    CostFactors,
    GeneratorParams,
    SustainabilityParams,
    TCOParams,
)
from matrix_calculator.economics import (
    calculate_carbon_footprint,
    calculate_carbon_savings,
    calculate_cost,
    calculate_sustainability,
    calculate_tco,
)
from matrix_calculator.economics.cost_rollup import busbar_cost, cooling_cost, e_house_area
from matrix_calculator.economics.tco import present_value_factors
from matrix_calculator.electrical import size_battery, size_electrical, size_generator, size_ups
from matrix_calculator.pricing_matrix import PricingMatrix
from matrix_calculator.requests import SustainabilityOptions, normalize_request
from matrix_calculator.results import GeneratorResult, PowerResult
from matrix_calculator.selectors import CoolingType
from matrix_calculator.thermal import size_cooling


def _sized(kw, cooling, racks, options=None, params=None):
    """Run the sizing stages the cost rollup depends on"""
    params = params or CalculationParams()
    request = normalize_request(kw, cooling, racks, options)
    mode = request.options.redundancy_mode or params.electrical.redundancy_mode
    ups = size_ups(request.total_it_load_kw, mode, params.power)
    power = PowerResult(
        ups=ups,
        battery=size_battery(request.total_it_load_kw, params.power),
        generator=size_generator(ups.required_capacity_kw, request.options.include_generator, params.generator),
    )
    electrical = size_electrical(request.kw_per_rack, params.electrical)
    cooling_result = size_cooling(request.kw_per_rack, request.total_racks, request.cooling_type, params.cooling)
    return request, electrical, cooling_result, power, params


class TestCostRollup(unittest.TestCase):
    """Test itemized project cost"""

    def setUp(self):
        self.pricing = PricingMatrix()

    def test_air_breakdown(self):
        """10 kW × 28 racks, air cooled, default pricing"""
        request, electrical, cooling, power, params = _sized(10, "air", 28)
        cost = calculate_cost(request, electrical, cooling, power, self.pricing, params)

        self.assertEqual(cost.electrical.busbar, 78000.0)
        self.assertEqual(cost.electrical.tap_off_box, 33600.0)
        self.assertEqual(cost.electrical.rpdu, 98000.0)
        self.assertEqual(cost.electrical.total, 209600.0)
        self.assertEqual(cost.cooling, 18000.0)
        self.assertEqual(cost.power.ups, 210000.0)
        self.assertEqual(cost.power.battery, 70000.0)
        self.assertEqual(cost.power.generator, 0.0)
        self.assertEqual(cost.infrastructure, 270000.0)
        self.assertEqual(cost.sustainability, 0.0)
        self.assertEqual(cost.equipment_total, 777600.0)
        self.assertEqual(cost.installation, 116640.0)
        self.assertEqual(cost.engineering, 77760.0)
        self.assertEqual(cost.contingency, 38880.0)
        self.assertEqual(cost.total_project_cost, 1010880.0)

    def test_cost_identity(self):
        for cooling in CoolingType:
            request, electrical, cooling_result, power, params = _sized(33.3, cooling, 17)
            cost = calculate_cost(request, electrical, cooling_result, power, self.pricing, params)
            self.assertAlmostEqual(
                cost.total_project_cost,
                cost.equipment_total + cost.installation + cost.engineering + cost.contingency,
                places=6)

    def test_per_rack_and_per_kw(self):
        request, electrical, cooling, power, params = _sized(10, "air", 28)
        cost = calculate_cost(request, electrical, cooling, power, self.pricing, params)
        self.assertAlmostEqual(cost.cost_per_rack * 28, cost.total_project_cost, places=4)
        self.assertAlmostEqual(cost.cost_per_kw * 280, cost.total_project_cost, places=4)

    def test_dlc_uses_custom_tap_off(self):
        request, electrical, cooling, power, params = _sized(10, "dlc", 28)
        cost = calculate_cost(request, electrical, cooling, power, self.pricing, params)
        self.assertEqual(cost.electrical.tap_off_box, 2400.0 * 28)
        self.assertEqual(cost.cooling, 145000.0)

    def test_generator_priced(self):
        request, electrical, cooling, power, params = _sized(10, "air", 28, {"includeGenerator": True})
        cost = calculate_cost(request, electrical, cooling, power, self.pricing, params)
        # 500 kVA set priced as 1000kVA model plus an 800 L tank
        self.assertEqual(cost.power.generator, 200000.0 + 800 * 2.0)
        self.assertEqual(cost.infrastructure, 120000.0 + 5000.0 * 60)

    def test_sustainability_add_ons(self):
        options = {"sustainabilityOptions": {
            "enableWasteHeatRecovery": True,
            "enableWaterRecycling": True,
            "renewableEnergyPercentage": 50,
        }}
        request, electrical, cooling, power, params = _sized(10, "air", 28, options)
        cost = calculate_cost(request, electrical, cooling, power, self.pricing, params)
        # 280 kW × 50% × 1.5 oversize × 1500 per kW of solar
        self.assertEqual(cost.sustainability, 100000.0 + 80000.0 + 315000.0)

    def test_no_solar_without_explicit_percentage(self):
        request, electrical, cooling, power, params = _sized(10, "air", 28)
        cost = calculate_cost(request, electrical, cooling, power, self.pricing, params)
        self.assertEqual(cost.sustainability, 0.0)

    def test_stored_prices_apply(self):
        pricing = PricingMatrix.model_validate({"rdhx": {"basic": 7000}})
        request, electrical, cooling, power, params = _sized(10, "air", 28)
        cost = calculate_cost(request, electrical, cooling, power, pricing, params)
        self.assertEqual(cost.cooling, 21000.0)


class TestCostHelpers:
    """Test component pricing helpers"""

    def test_busbar_base_by_rating(self):
        pricing = PricingMatrix()
        assert busbar_cost(1250, pricing) == 42000.0 + 1200.0 * 30
        assert busbar_cost(1600, pricing) == 65000.0 + 1200.0 * 30

    def test_hybrid_cooling_cost(self):
        cooling = size_cooling(10, 28, CoolingType.HYBRID, CalculationParams().cooling)
        assert cooling_cost(cooling, 28, PricingMatrix()) == pytest.approx(101000.0)

    def test_immersion_cooling_cost(self):
        cooling = size_cooling(10, 28, CoolingType.IMMERSION, CalculationParams().cooling)
        assert cooling_cost(cooling, 28, PricingMatrix()) == pytest.approx(727500.0)

    def test_e_house_area(self):
        _, _, _, power, params = _sized(10, "air", 28)
        assert e_house_area(power, params) == 30.0


class TestSustainability:
    """Test energy, water and heat recovery"""

    def test_air_defaults(self):
        result = calculate_sustainability(280, 1.4, CoolingType.AIR, SustainabilityOptions(),
                                          SustainabilityParams())
        assert result.annual_it_energy_kwh == 2452800.0
        assert result.annual_total_energy_kwh == pytest.approx(3433920.0)
        assert result.annual_overhead_energy_kwh == pytest.approx(981120.0)
        assert result.water_usage_m3 == pytest.approx(1226.4)
        assert result.water_usage_effectiveness == pytest.approx(0.5)
        assert result.water_recycled is False
        assert result.waste_heat_recovered_kwh == 0.0
        assert result.renewable_percentage == pytest.approx(20.0)

    def test_water_recycling(self):
        options = SustainabilityOptions(enable_water_recycling=True)
        result = calculate_sustainability(280, 1.4, CoolingType.AIR, options, SustainabilityParams())
        assert result.water_usage_m3 == pytest.approx(490.6)
        assert result.water_recycled is True

    def test_waste_heat_recovery(self):
        options = SustainabilityOptions(enable_waste_heat_recovery=True)
        result = calculate_sustainability(280, 1.4, CoolingType.AIR, options, SustainabilityParams())
        assert result.waste_heat_recovered_kwh == pytest.approx(1373568.0)
        assert result.waste_heat_value == pytest.approx(68678.4)

    def test_explicit_renewable_percentage(self):
        options = SustainabilityOptions(renewable_energy_percentage=65)
        result = calculate_sustainability(280, 1.4, CoolingType.AIR, options, SustainabilityParams())
        assert result.renewable_percentage == 65


class TestCarbonFootprint:
    """Test annual emissions"""

    def test_grid_only(self):
        carbon = calculate_carbon_footprint(3433920.0, 20.0, GeneratorResult.default(),
                                            SustainabilityParams(), GeneratorParams())
        assert carbon.grid_emissions_kg == pytest.approx(961497.6)
        assert carbon.generator_emissions_kg == 0.0
        assert carbon.total_emissions_tonnes == pytest.approx(961.5)
        assert carbon.avoided_emissions_kg == pytest.approx(240374.4)
        assert carbon.carbon_intensity == pytest.approx(0.28)

    def test_generator_testing(self):
        generator = size_generator(336, True, GeneratorParams())
        carbon = calculate_carbon_footprint(3433920.0, 20.0, generator,
                                            SustainabilityParams(), GeneratorParams())
        # 500 kVA × 24 h × 0.8 load × 0.8 kg/kWh
        assert carbon.generator_emissions_kg == pytest.approx(7680.0)
        assert carbon.total_emissions_kg == pytest.approx(961497.6 + 7680.0)

    def test_fully_renewable(self):
        carbon = calculate_carbon_footprint(1000.0, 100.0, GeneratorResult.default(),
                                            SustainabilityParams(), GeneratorParams())
        assert carbon.grid_emissions_kg == 0.0

    def test_zero_energy(self):
        carbon = calculate_carbon_footprint(0.0, 20.0, GeneratorResult.default(),
                                            SustainabilityParams(), GeneratorParams())
        assert carbon.carbon_intensity == 0.0


class TestCarbonSavings:
    """Test savings between two configurations"""

    def test_dlc_against_air(self, calculator):
        air = calculator.calculate(10, "air", 28)
        dlc = calculator.calculate(10, "dlc", 28)
        savings = calculate_carbon_savings(air, dlc)
        energy = air.sustainability.annual_total_energy_kwh - dlc.sustainability.annual_total_energy_kwh
        assert savings["energy_savings_kwh"] == pytest.approx(energy)
        assert savings["carbon_savings_kg"] > 0
        assert savings["cost_savings"] > 0
        expected = round(energy / air.sustainability.annual_total_energy_kwh * 100, 1)
        assert savings["percentage_savings"]["energy"] == pytest.approx(expected, abs=0.05)

    def test_same_configuration(self, calculator):
        air = calculator.calculate(10, "air", 28)
        savings = calculate_carbon_savings(air, air)
        assert savings["carbon_savings_kg"] == 0.0
        assert savings["percentage_savings"] == {"carbon": 0.0, "cost": 0.0, "energy": 0.0}

    def test_worse_configuration_is_negative(self, calculator):
        savings = calculate_carbon_savings(calculator.calculate(10, "dlc", 28),
                                           calculator.calculate(10, "air", 28))
        assert savings["carbon_savings_kg"] < 0


class TestTCO(unittest.TestCase):
    """Test total cost of ownership"""

    def test_present_value_factors(self):
        np.testing.assert_allclose(present_value_factors(2, 0.0, 0.0), [1.0, 1.0])
        factors = present_value_factors(10, 0.02, 0.05)
        self.assertEqual(len(factors), 10)
        self.assertTrue(np.all(np.diff(factors) < 0))

    def test_air(self):
        tco = calculate_tco(1000000.0, 1000000.0, CoolingType.AIR, False, CostFactors(), TCOParams())
        self.assertEqual(tco.annual_energy_cost, 120000.0)
        self.assertEqual(tco.annual_maintenance_cost, 30000.0)
        self.assertEqual(tco.annual_operational_cost, 20000.0)
        self.assertEqual(tco.annual_operating_cost, 170000.0)
        self.assertEqual(tco.total_5_year, 1850000.0)
        self.assertEqual(tco.total_10_year, 2700000.0)

        expected_npv = 1000000.0 + sum(170000.0 * 1.02 ** y / 1.05 ** y for y in range(1, 11))
        self.assertAlmostEqual(tco.npv, expected_npv, delta=0.01)
        self.assertAlmostEqual(tco.annualized_tco, expected_npv / 10, delta=0.01)

    def test_discounting_below_flat_total(self):
        tco = calculate_tco(1000000.0, 1000000.0, CoolingType.AIR, False, CostFactors(), TCOParams())
        self.assertLess(tco.npv, tco.total_10_year)

    def test_maintenance_scales_with_cooling(self):
        tco = calculate_tco(1000000.0, 0.0, CoolingType.DLC, False, CostFactors(), TCOParams())
        self.assertEqual(tco.annual_maintenance_cost, 45000.0)

    def test_generator_maintenance(self):
        tco = calculate_tco(1000000.0, 0.0, CoolingType.AIR, True, CostFactors(), TCOParams())
        self.assertEqual(tco.annual_maintenance_cost, 34500.0)


if __name__ == '__main__':
    unittest.main()

"""
Unit tests for calculation parameters, pricing matrix, request coercion
and the shared pipeline helpers
"""

import unittest
import math
import pytest
from pydantic import ValidationError
from matrix_calculator.calculation_params import (
    CalculationParams,
    CoolingParams,
    ElectricalParams,
)
from matrix_calculator.exceptions import CalculationError, MatrixCalculatorError
from matrix_calculator.pricing_matrix import PricingMatrix
from matrix_calculator.requests import (
    CalculationOptions,
    Location,
    normalize_request,
)
from matrix_calculator.rounding import ceil_int, round_half_up, round_int, round_money
from matrix_calculator.selectors import (
    CoolingType,
    GeneratorModel,
    RDHXModel,
    RedundancyMode,
    RPDUSize,
    TapOffBox,
    UPSFrame,
    parse_cooling_type,
    parse_redundancy_mode,
)
from matrix_calculator.stages import run_stage


class TestCalculationParams(unittest.TestCase):
    """Test parameter validation and section updates"""

    def test_defaults(self):
        params = CalculationParams()
        self.assertEqual(params.electrical.voltage_factor, 400.0)
        self.assertEqual(params.electrical.power_factor, 0.9)
        self.assertEqual(params.electrical.redundancy_mode, RedundancyMode.N_PLUS_1)
        self.assertEqual(params.cooling.dlc_residual_heat_fraction, 0.25)
        self.assertEqual(params.cooling.flow_rate_factor, 2.22)
        self.assertEqual(params.power.battery_runtime, 10.0)
        self.assertEqual(params.power.battery_efficiency, 0.95)
        self.assertEqual(params.sustainability.carbon_intensity_grid, 0.35)
        self.assertEqual(params.tco.lifespan_years, 10)

    def test_store_keys_and_field_names(self):
        by_alias = ElectricalParams.model_validate({"voltageFactor": 415})
        by_name = ElectricalParams(voltage_factor=415)
        self.assertEqual(by_alias, by_name)

    def test_fraction_bounds(self):
        with self.assertRaises(ValidationError):
            CoolingParams(dlcResidualHeatFraction=1.5)
        with self.assertRaises(ValidationError):
            ElectricalParams(powerFactor=0)

    def test_frozen(self):
        params = CalculationParams()
        with self.assertRaises(ValidationError):
            params.electrical.voltage_factor = 230.0

    def test_with_redundancy_mode(self):
        params = CalculationParams()
        updated = params.with_redundancy_mode("2N")
        self.assertEqual(updated.electrical.redundancy_mode, RedundancyMode.TWO_N)
        self.assertEqual(params.electrical.redundancy_mode, RedundancyMode.N_PLUS_1)
        self.assertEqual(updated.cooling, params.cooling)

    def test_with_redundancy_mode_ignores_unknown(self):
        params = CalculationParams().with_redundancy_mode(RedundancyMode.N)
        self.assertEqual(params.with_redundancy_mode("7N").electrical.redundancy_mode, RedundancyMode.N)

    def test_with_battery_runtime(self):
        params = CalculationParams()
        self.assertEqual(params.with_battery_runtime(20).power.battery_runtime, 20.0)
        self.assertIs(params.with_battery_runtime(0), params)
        self.assertIs(params.with_battery_runtime(-5), params)

    def test_with_energy_rates(self):
        params = CalculationParams()
        updated = params.with_energy_rates(0.22, 0.35)
        self.assertEqual(updated.tco.electricity_rate, 0.22)
        self.assertEqual(updated.sustainability.carbon_intensity_grid, 0.35)
        self.assertEqual(updated.tco.discount_rate, params.tco.discount_rate)
        self.assertEqual(params.tco.electricity_rate, 0.12)

    def test_to_document(self):
        document = CalculationParams().to_document()
        self.assertIn("costFactors", document)
        self.assertEqual(document["electrical"]["redundancyMode"], "N+1")
        self.assertEqual(document["cooling"]["dlcResidualHeatFraction"], 0.25)


class TestPricingMatrix(unittest.TestCase):
    """Test price lookups"""

    def setUp(self):
        self.pricing = PricingMatrix()

    def test_lookup_by_store_key(self):
        self.assertEqual(self.pricing.price("rdhx", "highDensity"), 12000.0)
        self.assertEqual(self.pricing.price("ups", "module250kw"), 45000.0)
        self.assertEqual(self.pricing.price("eHouse", "perSqMeter"), 5000.0)

    def test_section_by_alias_or_name(self):
        self.assertIs(self.pricing.section("eHouse"), self.pricing.section("e_house"))

    def test_missing_key_is_zero(self):
        self.assertEqual(self.pricing.price("busbar", "base4000A"), 0.0)
        self.assertEqual(self.pricing.price("transformers", "anything"), 0.0)

    def test_additional_stored_keys(self):
        pricing = PricingMatrix.model_validate({"rdhx": {"premium": 9000}})
        self.assertEqual(pricing.price("rdhx", "premium"), 9000.0)
        self.assertEqual(pricing.price("rdhx", "basic"), 6000.0)

    def test_every_selector_priced(self):
        for tap in TapOffBox:
            self.assertGreater(self.pricing.price("tapOffBox", tap.value), 0)
        for rpdu in RPDUSize:
            self.assertGreater(self.pricing.price("rpdu", rpdu.value), 0)
        for model in RDHXModel:
            self.assertGreater(self.pricing.price("rdhx", model.value), 0)
        for frame in UPSFrame:
            self.assertGreater(self.pricing.price("ups", frame.value), 0)
        for generator in GeneratorModel:
            if generator is not GeneratorModel.NONE:
                self.assertGreater(self.pricing.price("generator", generator.price_key), 0)


class TestSelectors:
    """Test selector parsing"""

    def test_cooling_type(self):
        assert parse_cooling_type(" Immersion ") == CoolingType.IMMERSION
        assert parse_cooling_type("air-cooled") == CoolingType.AIR
        assert parse_cooling_type(CoolingType.DLC) == CoolingType.DLC
        assert parse_cooling_type(5) == CoolingType.AIR
        assert parse_cooling_type("water", default=None) is None

    def test_redundancy_mode(self):
        assert parse_redundancy_mode("2n+1") == RedundancyMode.TWO_N_PLUS_1
        assert parse_redundancy_mode("3N") == RedundancyMode.THREE_N
        assert parse_redundancy_mode(None) == RedundancyMode.N_PLUS_1


class TestNormalizeRequest:
    """Test input coercion to safe defaults"""

    def test_valid_input(self):
        request = normalize_request("10", "DLC", "28")
        assert request.kw_per_rack == 10.0
        assert request.cooling_type == CoolingType.DLC
        assert request.total_racks == 28
        assert request.total_it_load_kw == 280.0

    @pytest.mark.parametrize("kw", ["abc", 0, -5, None, True, float("nan"), float("inf")])
    def test_invalid_density(self, kw):
        assert normalize_request(kw, "air", 28).kw_per_rack == 10.0

    @pytest.mark.parametrize("racks", ["many", 0, -1, None])
    def test_invalid_rack_count(self, racks):
        assert normalize_request(10, "air", racks).total_racks == 28

    def test_invalid_cooling(self):
        assert normalize_request(10, "liquid nitrogen", 28).cooling_type == CoolingType.AIR

    def test_options_camel_case(self):
        request = normalize_request(10, "air", 28, {
            "redundancyMode": "2n",
            "includeGenerator": "true",
            "batteryRuntime": 15,
        })
        assert request.options.redundancy_mode == RedundancyMode.TWO_N
        assert request.options.include_generator is True
        assert request.options.battery_runtime == 15.0

    def test_options_snake_case(self):
        request = normalize_request(10, "air", 28, {"redundancy_mode": "N", "include_generator": 1})
        assert request.options.redundancy_mode == RedundancyMode.N
        assert request.options.include_generator is True

    def test_invalid_options(self):
        request = normalize_request(10, "air", 28, {"redundancyMode": "bogus", "batteryRuntime": -3})
        assert request.options.redundancy_mode == RedundancyMode.N_PLUS_1
        assert request.options.battery_runtime is None

    def test_missing_options(self):
        request = normalize_request(10, "air", 28)
        assert request.options == CalculationOptions()
        assert request.options.redundancy_mode is None

    def test_options_instance_passed_through(self):
        options = CalculationOptions(include_generator=True)
        assert normalize_request(10, "air", 28, options).options is options

    @pytest.mark.parametrize("value,expected", [(50, 50.0), ("35", 35.0), (150, 20.0), (-1, 20.0), ("x", 20.0)])
    def test_renewable_percentage(self, value, expected):
        request = normalize_request(10, "air", 28, {"sustainabilityOptions": {"renewableEnergyPercentage": value}})
        assert request.options.sustainability_options.renewable_energy_percentage == expected

    def test_location(self):
        request = normalize_request(10, "air", 28, {"location": {"lat": 1.35, "lng": 103.8, "address": "SG"}})
        assert request.options.location == Location(latitude=1.35, longitude=103.8, address="SG")

    def test_invalid_location_dropped(self):
        request = normalize_request(10, "air", 28, {"location": {"latitude": 95, "longitude": 0}})
        assert request.options.location is None

    def test_equivalent_inputs_share_cache_key(self):
        a = normalize_request(10, "air", 28, {"includeGenerator": True})
        b = normalize_request(10.0, "AIR", "28", {"include_generator": "yes"})
        assert a.cache_key() == b.cache_key()


class TestStages:
    """Test per-stage error capture"""

    def test_success(self):
        outcome = run_stage("electrical", lambda x: x * 2, 21)
        assert outcome.ok
        assert outcome.value == 42
        assert outcome.value_or(0) == 42

    def test_failure(self):
        outcome = run_stage("cooling", lambda: 1 / 0)
        assert not outcome.ok
        assert outcome.value_or("default") == "default"
        assert isinstance(outcome.error, CalculationError)
        assert isinstance(outcome.error, MatrixCalculatorError)
        assert outcome.error.stage == "cooling"
        assert isinstance(outcome.error.cause, ZeroDivisionError)


class TestRounding:
    """Test half-up rounding"""

    def test_half_away_from_zero(self):
        assert round_half_up(2.5) == 3.0
        assert round_half_up(-2.5) == -3.0
        assert round_half_up(0.125, 2) == 0.13

    def test_helpers(self):
        assert round_int(224.52) == 225
        assert ceil_int(2.01) == 3
        assert ceil_int(3.0) == 3
        assert round_money(1234.5678) == 1234.57
        assert math.isclose(round_half_up(1.23456, 4), 1.2346)


if __name__ == '__main__':
    unittest.main()

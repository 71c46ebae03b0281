"""
Tests for per-record derived metrics.
"""

import math

from weather_analytics.transform import derive_measurement, derive_metrics


def test_zero_humidity_gives_zero_ratio(make_measurement):
    for temp in (-5.0, 0.0, 37.2):
        derived = derive_measurement(make_measurement(temperature=temp, humidity=0.0))
        assert derived.temp_humidity_ratio == 0


def test_ratio_comfort_and_pressure_variation(make_measurement):
    derived = derive_measurement(make_measurement(temperature=20.0, humidity=50.0, pressure=1020.5))
    assert derived.temp_humidity_ratio == 0.4
    assert derived.comfort_index == 15.0
    assert derived.pressure_variation == 7.5


def test_ratio_keeps_two_decimals(make_measurement):
    derived = derive_measurement(make_measurement(temperature=10.0, humidity=30.0))
    assert derived.temp_humidity_ratio == 0.33


def test_out_of_range_inputs_propagate(make_measurement):
    derived = derive_measurement(make_measurement(temperature=10.0, humidity=-10.0, pressure=990.0))
    assert derived.temp_humidity_ratio == -1.0
    assert derived.comfort_index == 11.0
    assert derived.pressure_variation == -23.0


def test_reference_pressure_is_configurable(make_measurement):
    derived = derive_measurement(make_measurement(pressure=1000.0), reference_pressure=1000.0)
    assert derived.pressure_variation == 0.0


def test_base_measurement_is_carried_unchanged(sample_records):
    derived = derive_metrics(sample_records)
    assert [d.measurement for d in derived] == sample_records
    assert derived[3].city == "Madrid"
    assert derived[3].precipitation == 3.5


def test_to_dict_extends_the_wire_record(make_measurement):
    out = derive_measurement(make_measurement(temperature=20.0, humidity=50.0)).to_dict()
    assert out["windSpeed"] == 10.0
    assert out["tempHumidityRatio"] == 0.4
    assert out["comfortIndex"] == 15.0
    assert out["pressureVariation"] == 0.0


def test_nan_humidity_propagates_instead_of_raising(make_measurement):
    derived = derive_measurement(make_measurement(temperature=15.0, humidity=float("nan"), pressure=1020.0))
    assert math.isnan(derived.temp_humidity_ratio)
    assert math.isnan(derived.comfort_index)
    assert derived.pressure_variation == 7.0


def test_infinite_temperature_propagates(make_measurement):
    derived = derive_measurement(make_measurement(temperature=float("inf"), humidity=50.0))
    assert derived.temp_humidity_ratio == math.inf
    assert derived.comfort_index == math.inf

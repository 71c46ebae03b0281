"""
Shared fixtures for the weather analytics tests.
"""

from datetime import date

import pytest

from weather_analytics.models import Measurement


@pytest.fixture
def make_measurement():
    """Factory for measurements with neutral defaults for the fields a test does not care about."""

    def _make(
        day: str = "2024-01-01",
        city: str = "Madrid",
        temperature: float = 15.0,
        humidity: float = 60.0,
        pressure: float = 1013.0,
        wind_speed: float = 10.0,
        precipitation: float = 0.0,
    ) -> Measurement:
        return Measurement(
            date=date.fromisoformat(day),
            city=city,
            temperature=temperature,
            humidity=humidity,
            pressure=pressure,
            wind_speed=wind_speed,
            precipitation=precipitation,
        )

    return _make


@pytest.fixture
def sample_records(make_measurement):
    """Three cities over three days, deliberately not in date order."""
    return [
        make_measurement("2024-01-02", "Madrid", 12.0, 55.0, 1010.0, 8.0),
        make_measurement("2024-01-01", "Madrid", 10.0, 50.0, 1012.0, 6.0),
        make_measurement("2024-01-01", "Sevilla", 20.0, 40.0, 1015.0, 4.0),
        make_measurement("2024-01-03", "Madrid", 14.0, 65.0, 1008.0, 12.0, 3.5),
        make_measurement("2024-01-02", "Bilbao", 8.0, 80.0, 1005.0, 15.0, 7.2),
        make_measurement("2024-01-03", "Sevilla", 24.0, 35.0, 1016.0, 5.0),
    ]


@pytest.fixture
def payload_rows():
    """Wire-format rows as served by the weather endpoint."""
    return [
        {
            "date": "2024-01-01",
            "city": "Madrid",
            "temperature": 11.3,
            "humidity": 62.1,
            "pressure": 1018.4,
            "windSpeed": 9.7,
            "precipitation": 0,
        },
        {
            "date": "2024-01-02T00:00:00.000Z",
            "city": "Bilbao",
            "temperature": 7.9,
            "humidity": 84.0,
            "pressure": 1003.2,
            "windSpeed": 17.5,
            "precipitation": 12.4,
        },
    ]

"""
Synthetic measurement generator.

Produces one record per city per day: a seasonal sine on top of each city's
base temperature plus uniform noise, and independent draws for humidity,
pressure, wind and (30% of the time) precipitation. Passing a seed makes
the output reproducible.
"""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import List, Optional, Sequence

import numpy as np

from .config import CITIES, DEFAULT_START, City
from .models import Measurement
from .transform import round_half_up

DEFAULT_DAYS = 90
SEASON_PERIOD_DAYS = 60
SEASON_AMPLITUDE = 8.0
TEMP_NOISE = 6.0
RAIN_PROBABILITY = 0.3


def generate_measurements(
    cities: Sequence[City] = CITIES,
    start: date = DEFAULT_START,
    days: int = DEFAULT_DAYS,
    seed: Optional[int] = None,
) -> List[Measurement]:
    if days < 0:
        raise ValueError(f"days must be >= 0, got {days}")

    rng = np.random.default_rng(seed)
    out: List[Measurement] = []

    for i in range(days):
        day = start + timedelta(days=i)
        seasonal = math.sin((i / SEASON_PERIOD_DAYS) * math.pi * 2) * SEASON_AMPLITUDE

        for city in cities:
            noise = (rng.random() - 0.5) * TEMP_NOISE
            rains = rng.random() < RAIN_PROBABILITY
            out.append(
                Measurement(
                    date=day,
                    city=city.name,
                    temperature=round_half_up(city.base_temp + seasonal + noise, 1),
                    humidity=round_half_up(50 + rng.random() * 40, 1),
                    pressure=round_half_up(1000 + rng.random() * 40, 1),
                    wind_speed=round_half_up(5 + rng.random() * 15, 1),
                    precipitation=round_half_up(rng.random() * 20, 1) if rains else 0.0,
                )
            )
    return out

"""
Api.Template — Forecast Service
=================================

What:  Produces the synthetic forecast returned by GET /WeatherForecast.
How:   One record per day for the next `days` days starting tomorrow, with a
       temperature drawn from [-20, 55) and a random summary.
Who:   Constructed by the application factory with an explicit logger and
       stored on app.state; the route pulls it from there.

Randomness comes from the module-level `random` functions, which share one
generator and are safe to call from concurrent requests.
"""

import logging
import random
from datetime import date, timedelta
from typing import List, Optional

from api_template.schemas.forecast import SUMMARIES, WeatherForecast

MIN_TEMPERATURE_C = -20
MAX_TEMPERATURE_C = 55  # exclusive


class ForecastService:
    """Stateless generator of demo forecast records."""

    def __init__(self, logger: logging.Logger, days: int = 5) -> None:
        self.logger = logger
        self.days = days

    def get_forecast(self, today: Optional[date] = None) -> List[WeatherForecast]:
        """
        Build the forecast for the days after `today` (defaults to the local date).

        Returns:
            `self.days` records with strictly increasing, consecutive dates.
        """
        self.logger.info("Getting weather forecast")
        start = today or date.today()
        return [
            WeatherForecast(
                date=start + timedelta(days=offset),
                temperature_c=random.randrange(MIN_TEMPERATURE_C, MAX_TEMPERATURE_C),
                summary=random.choice(SUMMARIES),
            )
            for offset in range(1, self.days + 1)
        ]

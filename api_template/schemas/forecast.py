"""
Api.Template — Forecast Response Schema
=========================================

What:  Pydantic model for the demo endpoint's forecast records.
How:   Field names are snake_case in Python and camelCase on the wire
       (temperatureC, temperatureF). FastAPI serializes response models
       by alias.
"""

import datetime

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel

SUMMARIES = (
    "Freezing",
    "Bracing",
    "Chilly",
    "Cool",
    "Mild",
    "Warm",
    "Balmy",
    "Hot",
    "Sweltering",
    "Scorching",
)


class WeatherForecast(BaseModel):
    """One synthetic day of weather."""

    date: datetime.date = Field(description="Forecast day (YYYY-MM-DD)")
    temperature_c: int = Field(description="Temperature in degrees Celsius")
    summary: str = Field(description="Human-readable description of the day")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @computed_field(alias="temperatureF", description="Temperature in degrees Fahrenheit")
    @property
    def temperature_f(self) -> int:
        return 32 + int(self.temperature_c / 0.5556)

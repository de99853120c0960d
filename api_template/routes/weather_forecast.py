"""
Api.Template — Weather Forecast Route
=======================================

What:  Handles GET /WeatherForecast, the template's demo endpoint.
How:   Delegates to the ForecastService held on app.state and returns its
       records as JSON.
Who:   Any client; the endpoint takes no input.

Error responses:
    Nothing here fails deliberately. An unexpected fault is turned into a
    500 problem-details body by the exception handling middleware; the 500
    entry below documents that shape.
"""

from typing import List

from fastapi import APIRouter, Depends, Request

from api_template.problem_details import ProblemDetails
from api_template.schemas.forecast import WeatherForecast
from api_template.services.forecast_service import ForecastService

router = APIRouter(tags=["WeatherForecast"])


def get_forecast_service(request: Request) -> ForecastService:
    return request.app.state.forecast_service


@router.get(
    "/WeatherForecast",
    name="GetWeatherForecast",
    operation_id="GetWeatherForecast",
    response_model=List[WeatherForecast],
    responses={
        200: {"description": "Forecast for the next 5 days"},
        500: {"description": "Server error", "model": ProblemDetails},
    },
    summary="Get weather forecast",
    description="Returns a weather forecast for the next 5 days.",
)
@router.get(
    "/weatherforecast",
    response_model=List[WeatherForecast],
    include_in_schema=False,
)
async def get_weather_forecast(
    service: ForecastService = Depends(get_forecast_service),
) -> List[WeatherForecast]:
    return service.get_forecast()

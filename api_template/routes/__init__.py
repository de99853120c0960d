# Routes package init
"""
Api.Template — API Routes Package
===================================

Route Inventory:
    - weather_forecast.py:  GET /WeatherForecast   (demo forecast records)
    - health.py:            GET /health            (liveness probe)

Routes stay thin: they pull a service from app.state and return its result.
"""

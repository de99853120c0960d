"""
Api.Template — Response Schemas
=================================

Schema Inventory:
    - WeatherForecast: one day of the demo forecast (camelCase on the wire)
"""

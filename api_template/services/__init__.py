# Services package init
"""
Api.Template — Services Layer
===============================

Service Inventory:
    - ForecastService: synthetic 5-day forecast for the demo endpoint

Services are constructed by the application factory with their logger and
stored on app.state, so routes never reach for module-level singletons.
"""

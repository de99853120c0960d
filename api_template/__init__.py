"""
Api.Template — Application Package
====================================

A starter template for an HTTP API service: one demo endpoint plus the
operational wiring every service needs (structured logging, compression,
health checks, API documentation, problem-details error handling).

    ┌─────────────────────────────────────┐
    │      Middleware (request pipeline)  │  ← cross-cutting concerns
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services & Schemas (Logic)     │  ← forecast generation, models
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

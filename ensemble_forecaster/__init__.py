"""
Ensemble Forecaster Root Module

Deterministic ensemble of statistical heuristics that forecasts the next
label of a binary-outcome event sequence.

Layer Structure:
- Domain: Events, experts, drift detection, backtesting and weight tuning
- Application: Use cases and DTOs
- Infrastructure: History source gateway, in-memory stores and health checks
- Presentation: FastAPI routers
- Shared: Cross-cutting concerns and shared utilities
- Main: Composition root, application entry point and configuration
"""

__version__ = "1.0.0"

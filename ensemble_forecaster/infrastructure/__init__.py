"""Adapters behind the domain interfaces: HTTP feed, probes, in-memory stores."""

from ensemble_forecaster.infrastructure import gateways, repositories, services

__all__ = ["gateways", "repositories", "services"]

"""
Shared utilities for the Cedar policy boundary.

This package aggregates common building blocks:

- config: Boundary configuration via pydantic-settings
- logging: Structured logging with call correlation
- metrics: Prometheus metrics helpers
- errors: Fault types raised across the boundary

Do not import from cedar_boundary into shared/.
"""

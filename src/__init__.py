"""Lycans Stats API.

This package exposes the lycans statistics through a hexagonal
architecture.

Layers:
- application: Use cases and port interfaces
- infrastructure: Adapters over the lycans package
- api: REST endpoints
"""

__version__ = "1.0.0"

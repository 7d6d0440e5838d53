"""
StarBook API - Mount Control Layer

This package contains the mount control logic for the StarBook library,
separated from CLI presentation concerns.

The API is organized into logical subpackages:
- core: Coordinates, types, enums, constants and exceptions
- telescope: Transport, session, status polling, simulation and screen codec
- catalogs: Object name lookup
"""

# Activate deal contracts for runtime validation
import deal


deal.activate()

__all__: list[str] = [
    # Package is organized into subpackages - import directly from them:
    # from starbook.api.core import ...
    # from starbook.api.telescope import ...
]

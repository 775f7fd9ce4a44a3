"""Management platform backends.

Importing this package registers the built-in backends with the global
platform registry.
"""

from .base import (
    MaintenancePlatform,
    PlatformError,
    RemoteUpdateError,
    PlatformRegistry,
    platform_registry,
    register_platform,
    create_platform,
)

from .inventory import InventoryPlatform

__all__ = [
    'MaintenancePlatform',
    'PlatformError',
    'RemoteUpdateError',
    'PlatformRegistry',
    'platform_registry',
    'register_platform',
    'create_platform',
    'InventoryPlatform',
]

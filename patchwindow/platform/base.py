"""Base classes and interfaces for management platform access.

This module defines the narrow interface the rescheduler needs from a
systems-management platform: list collections, read their maintenance windows
and apply a single-occurrence schedule to a named window. Implementations are
registered by type name and created from configuration.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..scheduling.models import CollectionRef, ExistingWindow, ScheduledWindow


class PlatformError(Exception):
    """Raised when the management platform cannot be reached or set up."""
    pass


class RemoteUpdateError(PlatformError):
    """Raised when the platform rejects a maintenance window update."""

    def __init__(self, message: str, collection_id: Optional[str] = None, window_name: Optional[str] = None):
        super().__init__(message)
        self.collection_id = collection_id
        self.window_name = window_name


class MaintenancePlatform(ABC):
    """Abstract base class for management platform backends."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.platform_type = self.__class__.__name__
        self.site = config.get('site')

    @abstractmethod
    def list_collections(self) -> List[CollectionRef]:
        """List collections in platform order.

        Raises:
            PlatformError: If collections cannot be listed
        """
        pass

    @abstractmethod
    def get_windows(self, collection: CollectionRef) -> List[ExistingWindow]:
        """Get the maintenance windows configured on a collection.

        Raises:
            PlatformError: If the collection's windows cannot be read
        """
        pass

    @abstractmethod
    def apply_schedule(self, collection_id: str, window_name: str, schedule: ScheduledWindow) -> None:
        """Apply a non-recurring schedule to a named maintenance window.

        Raises:
            RemoteUpdateError: If the platform rejects the update
        """
        pass


class PlatformRegistry:
    """Registry for managing platform backend types."""

    def __init__(self):
        self._platforms: Dict[str, type] = {}

    def register(self, platform_type: str, platform_class: type) -> None:
        """Register a platform backend class.

        Args:
            platform_type: Type identifier used in configuration
            platform_class: Backend class to register
        """
        if not issubclass(platform_class, MaintenancePlatform):
            raise ValueError(f"Platform class must inherit from MaintenancePlatform: {platform_class}")

        self._platforms[platform_type] = platform_class

    def get_platform_class(self, platform_type: str) -> Optional[type]:
        return self._platforms.get(platform_type)

    def create_platform(self, platform_type: str, config: Dict[str, Any]) -> MaintenancePlatform:
        """Create a platform backend instance.

        Raises:
            ValueError: If the platform type is not registered
        """
        platform_class = self.get_platform_class(platform_type)
        if not platform_class:
            raise ValueError(f"Unknown platform type: {platform_type}")

        return platform_class(config)

    def list_platform_types(self) -> List[str]:
        return list(self._platforms.keys())


# Global platform registry
platform_registry = PlatformRegistry()


def register_platform(platform_type: str):
    """Decorator to register a platform backend class.

    Args:
        platform_type: Type identifier for the backend
    """
    def decorator(platform_class: type) -> type:
        platform_registry.register(platform_type, platform_class)
        return platform_class

    return decorator


def create_platform(platform_type: str, config: Dict[str, Any]) -> MaintenancePlatform:
    """Convenience function to create a registered platform backend."""
    return platform_registry.create_platform(platform_type, config)

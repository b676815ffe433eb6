"""Resource registry: maps resource names to API module instances."""

from __future__ import annotations

import structlog

from .base import ResourceAPI

logger = structlog.get_logger()


class ResourceRegistry:
    """Registry of resource APIs, keyed by their cache resource name."""

    def __init__(self) -> None:
        self._resources: dict[str, ResourceAPI] = {}

    def register(self, resource: ResourceAPI) -> None:
        """Register *resource* under its ``name``."""
        self._resources[resource.name] = resource
        logger.debug("resource_registered", resource=resource.name, path=resource.path)

    def get(self, name: str) -> ResourceAPI | None:
        """Look up a resource by name. Returns None if unknown."""
        return self._resources.get(name)

    def __getitem__(self, name: str) -> ResourceAPI:
        try:
            return self._resources[name]
        except KeyError:
            raise KeyError(f"Unknown resource {name!r}; known: {', '.join(self.names)}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._resources

    @property
    def names(self) -> list[str]:
        """Sorted list of registered resource names."""
        return sorted(self._resources)

from typing import Callable, Type
import catalogue


class registry(object):
    containers = catalogue.create("flatarray", "containers", entry_points=True)

    @classmethod
    def create(cls, registry_name: str, entry_points: bool = False) -> None:
        """Create a new custom registry."""
        if hasattr(cls, registry_name):
            raise ValueError(f"Registry '{registry_name}' already exists")
        reg = catalogue.create("flatarray", registry_name, entry_points=entry_points)
        setattr(cls, registry_name, reg)

    @classmethod
    def get(cls, registry_name: str, func_name: str) -> Callable:
        """Get a registered function from a given registry."""
        if not hasattr(cls, registry_name):
            raise ValueError(f"Unknown registry: '{registry_name}'")
        reg = getattr(cls, registry_name)
        if func_name not in reg:
            raise ValueError(f"Could not find '{func_name}' in '{registry_name}'")
        return reg.get(func_name)

    @classmethod
    def has(cls, registry_name: str, func_name: str) -> bool:
        """Check whether a function is available in a registry."""
        if not hasattr(cls, registry_name):
            return False
        reg = getattr(cls, registry_name)
        return func_name in reg


def get_container_class(name: str) -> Type:
    return registry.get("containers", name)

"""
Capabilities Package - Tools the model can call.

- base.py        : Capability contract, schemas, results, parameter helpers
- registry.py    : Thread-safe capability registry
- hello_world.py : Greeting capability
- system_info.py : Host and runtime information
- calculator.py  : Two-operand arithmetic
"""
import threading
from typing import Optional

from aide.capabilities.base import (
    Capability,
    CapabilityContext,
    CapabilityInputError,
    CapabilityResult,
    PropertySchema,
    ToolDefinition,
    ToolSchema,
)
from aide.capabilities.calculator import CalculatorCapability
from aide.capabilities.hello_world import HelloWorldCapability
from aide.capabilities.registry import CapabilityRegistry
from aide.capabilities.system_info import SystemInfoCapability


def build_default_registry() -> CapabilityRegistry:
    """Registry preloaded with the built-in capabilities."""
    registry = CapabilityRegistry()
    registry.register_range([
        HelloWorldCapability(),
        SystemInfoCapability(),
        CalculatorCapability(),
    ])
    return registry


# Singleton instance
_registry: Optional[CapabilityRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> CapabilityRegistry:
    """
    Get or create the global CapabilityRegistry.

    Returns:
        The singleton registry, built by build_default_registry()
    """
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = build_default_registry()
        return _registry


def reset_registry() -> None:
    """Reset the global registry (useful for testing)."""
    global _registry
    with _registry_lock:
        _registry = None


__all__ = [
    "Capability",
    "CapabilityContext",
    "CapabilityInputError",
    "CapabilityResult",
    "PropertySchema",
    "ToolDefinition",
    "ToolSchema",
    "CapabilityRegistry",
    "HelloWorldCapability",
    "SystemInfoCapability",
    "CalculatorCapability",
    "build_default_registry",
    "get_registry",
    "reset_registry",
]

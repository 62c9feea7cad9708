"""
Capability Registry - thread-safe name -> capability store.

Every operation, reads included, runs under a single lock guarding the
underlying dict. Registry mutation is rare (startup) so the lock is
never contended in practice.

Name comparison is exact and case-sensitive.
"""
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from aide.capabilities.base import Capability, ToolDefinition
from aide.core.exceptions import CapabilityNotFoundError, DuplicateCapabilityError, ValidationError
from aide.core.logging_config import get_logger

logger = get_logger(__name__)


class CapabilityRegistry:
    """
    In-memory registry of capabilities available to the model.

    Example:
        >>> registry = CapabilityRegistry()
        >>> registry.register(HelloWorldCapability())
        >>> registry.try_get("hello_world")
        <HelloWorldCapability name='hello_world'>
        >>> registry.try_get("Hello_World") is None
        True
    """

    def __init__(self):
        self._capabilities: Dict[str, Capability] = {}
        self._lock = threading.Lock()

    def register(self, capability: Capability) -> None:
        """
        Register a capability.

        Raises:
            ValidationError: If capability is None or has no name
            DuplicateCapabilityError: If the name is already registered;
                the registry is left unchanged
        """
        if capability is None:
            raise ValidationError("capability cannot be None", field="capability")
        name = getattr(capability, "name", None)
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("capability name cannot be empty", field="name")

        with self._lock:
            if name in self._capabilities:
                raise DuplicateCapabilityError(name)
            self._capabilities[name] = capability

        logger.info(f"Registered capability: {name}")

    def register_range(self, capabilities: Iterable[Capability]) -> None:
        """
        Register several capabilities in order.

        Stops at the first failure; capabilities registered before it
        stay registered.
        """
        if capabilities is None:
            raise ValidationError("capabilities cannot be None", field="capabilities")
        for capability in capabilities:
            self.register(capability)

    def get(self, name: str) -> Capability:
        """
        Get a capability by name.

        Raises:
            CapabilityNotFoundError: If no capability has this name
        """
        with self._lock:
            capability = self._capabilities.get(name) if isinstance(name, str) else None
        if capability is None:
            raise CapabilityNotFoundError(str(name))
        return capability

    def try_get(self, name: str) -> Optional[Capability]:
        """Get a capability by name, or None if it is not registered."""
        if not isinstance(name, str) or not name.strip():
            return None
        with self._lock:
            return self._capabilities.get(name)

    def get_all(self) -> Tuple[Capability, ...]:
        """Snapshot of all registered capabilities."""
        with self._lock:
            return tuple(self._capabilities.values())

    def to_tool_definitions(self) -> List[ToolDefinition]:
        """One tool definition per registered capability."""
        with self._lock:
            return [capability.to_tool_definition() for capability in self._capabilities.values()]

    def is_registered(self, name: str) -> bool:
        if not isinstance(name, str) or not name.strip():
            return False
        with self._lock:
            return name in self._capabilities

    def unregister(self, name: str) -> bool:
        """
        Remove a capability.

        Returns:
            True if it was removed, False if it was not registered
        """
        if not isinstance(name, str) or not name.strip():
            return False
        with self._lock:
            removed = self._capabilities.pop(name, None) is not None
        if removed:
            logger.info(f"Unregistered capability: {name}")
        return removed

    def clear(self) -> None:
        with self._lock:
            self._capabilities.clear()

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._capabilities)

    def __len__(self) -> int:
        return self.count

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_registered(name)

"""
Capability contract - what the model can call and what it gets back.

A capability is a named, schema-described unit of work. The model sees
it as a tool definition; the orchestrator invokes it with a
CapabilityContext and receives a CapabilityResult.

Expected failures (bad input, unavailable resource) are reported by
returning CapabilityResult.fail(...). Raising from execute() is reserved
for programming errors; the orchestrator still catches it and reports
it back to the model as text.
"""
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

# JSON-shaped values a tool call can carry
ParameterValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]


@dataclass(frozen=True)
class PropertySchema:
    """
    Schema of a single input property.

    Attributes:
        type: JSON schema type ("string", "number", "boolean", "array", "object")
        description: What the property means, shown to the model
        enum: Allowed values, if restricted
        default: Default value, if any
    """
    type: str
    description: str
    enum: Optional[Tuple[str, ...]] = None
    default: Any = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.type, "description": self.description}
        if self.enum:
            out["enum"] = list(self.enum)
        if self.default is not None:
            out["default"] = self.default
        return out


@dataclass(frozen=True)
class ToolSchema:
    """JSON schema of a capability's input object."""
    type: str = "object"
    properties: Dict[str, PropertySchema] = field(default_factory=dict)
    required: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "properties": {name: prop.to_dict() for name, prop in self.properties.items()},
            "required": list(self.required),
        }


@dataclass(frozen=True)
class ToolDefinition:
    """Definition of a capability as advertised to the model."""
    name: str
    description: str
    input_schema: ToolSchema

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema.to_dict(),
        }


@dataclass
class CapabilityContext:
    """
    Context provided to a capability during execution.

    Attributes:
        input: Primary input string
        parameters: Structured parameters from the model
        cancel_event: Set when the caller cancelled the turn
    """
    input: str = ""
    parameters: Dict[str, ParameterValue] = field(default_factory=dict)
    cancel_event: Optional[threading.Event] = None

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


@dataclass(frozen=True)
class CapabilityResult:
    """
    Result returned from capability execution.

    Use the ok() / fail() constructors: a successful result carries
    output and/or data, a failed one carries an error message.
    """
    success: bool
    output: Optional[str] = None
    data: Any = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, output: Optional[str] = None, data: Any = None) -> "CapabilityResult":
        return cls(success=True, output=output, data=data)

    @classmethod
    def fail(cls, error_message: str, error_code: Optional[str] = None) -> "CapabilityResult":
        return cls(success=False, error_message=error_message, error_code=error_code)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "output": self.output,
            "data": self.data,
            "error_message": self.error_message,
            "error_code": self.error_code,
        }


class Capability(ABC):
    """
    Base class for capabilities.

    Subclasses set ``name`` and ``description`` and implement
    get_input_schema() and execute().
    """

    name: str = ""
    description: str = ""

    @abstractmethod
    def get_input_schema(self) -> ToolSchema:
        """JSON schema for the input parameters the model should supply."""

    @abstractmethod
    def execute(self, context: CapabilityContext) -> CapabilityResult:
        """Run the capability."""

    def to_tool_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description=self.description,
            input_schema=self.get_input_schema(),
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


# ---------------------------------------------------------------------------
# Parameter coercion helpers
# ---------------------------------------------------------------------------

class CapabilityInputError(ValueError):
    """Raised by the param_* helpers when a parameter is missing or mistyped."""

    def __init__(self, key: str, message: str):
        super().__init__(f"Parameter '{key}' {message}")
        self.key = key


_MISSING = object()


def param_str(
    params: Mapping[str, Any],
    key: str,
    default: Optional[str] = None,
    required: bool = False
) -> Optional[str]:
    """
    Read a string parameter.

    Numbers and booleans are accepted and converted with str();
    lists and objects are rejected.
    """
    value = params.get(key, _MISSING)
    if value is _MISSING or value is None:
        if required:
            raise CapabilityInputError(key, "is required")
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    raise CapabilityInputError(key, f"must be a string, got {type(value).__name__}")


def param_float(
    params: Mapping[str, Any],
    key: str,
    default: Optional[float] = None,
    required: bool = False
) -> Optional[float]:
    """
    Read a numeric parameter.

    Models sometimes send numbers as strings ("15"); those are parsed.
    Booleans are rejected even though bool is an int subclass.
    """
    value = params.get(key, _MISSING)
    if value is _MISSING or value is None:
        if required:
            raise CapabilityInputError(key, "is required")
        return default
    if isinstance(value, bool):
        raise CapabilityInputError(key, "must be a number, got bool")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise CapabilityInputError(key, f"must be a number, got {value!r}")
    raise CapabilityInputError(key, f"must be a number, got {type(value).__name__}")


def param_bool(
    params: Mapping[str, Any],
    key: str,
    default: Optional[bool] = None,
    required: bool = False
) -> Optional[bool]:
    """Read a boolean parameter ("true"/"false" strings are accepted)."""
    value = params.get(key, _MISSING)
    if value is _MISSING or value is None:
        if required:
            raise CapabilityInputError(key, "is required")
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise CapabilityInputError(key, f"must be a boolean, got {value!r}")

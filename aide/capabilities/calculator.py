"""
Calculator capability - basic arithmetic on two numbers.

Gives the model exact arithmetic instead of guessing.
"""
import math

from aide.capabilities.base import (
    Capability,
    CapabilityContext,
    CapabilityInputError,
    CapabilityResult,
    PropertySchema,
    ToolSchema,
    param_float,
    param_str,
)

OPERATIONS = ("add", "subtract", "multiply", "divide")


def format_number(value: float) -> str:
    """Render integral results without a trailing '.0' (42.0 -> '42')."""
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


class CalculatorCapability(Capability):
    """Adds, subtracts, multiplies or divides two numbers."""

    name = "calculator"
    description = "Perform basic arithmetic operations (add, subtract, multiply, divide)"

    def get_input_schema(self) -> ToolSchema:
        return ToolSchema(
            properties={
                "operation": PropertySchema(
                    type="string",
                    description="The operation to perform",
                    enum=OPERATIONS,
                ),
                "a": PropertySchema(type="number", description="First number"),
                "b": PropertySchema(type="number", description="Second number"),
            },
            required=("operation", "a", "b"),
        )

    def execute(self, context: CapabilityContext) -> CapabilityResult:
        params = context.parameters
        try:
            operation = (param_str(params, "operation", default="add") or "add").strip().lower()
            a = param_float(params, "a", required=True)
            b = param_float(params, "b", required=True)
        except CapabilityInputError as e:
            return CapabilityResult.fail(f"Calculator error: {e}", error_code="CALC_ERROR")

        if operation == "add":
            result = a + b
        elif operation == "subtract":
            result = a - b
        elif operation == "multiply":
            result = a * b
        elif operation == "divide":
            if b == 0:
                return CapabilityResult.fail("Calculator error: division by zero", error_code="CALC_ERROR")
            result = a / b
        else:
            return CapabilityResult.fail(
                f"Calculator error: Unknown operation: {operation}",
                error_code="CALC_ERROR",
            )

        return CapabilityResult.ok(
            output=format_number(result),
            data={"operation": operation, "a": a, "b": b, "result": result},
        )

"""
Hello World capability - friendly greeting, mostly for smoke tests.
"""
from aide.capabilities.base import (
    Capability,
    CapabilityContext,
    CapabilityInputError,
    CapabilityResult,
    PropertySchema,
    ToolSchema,
    param_str,
)


class HelloWorldCapability(Capability):
    """Greets the user, by name when one is given."""

    name = "hello_world"
    description = "Send a friendly greeting. Can optionally include a name for personalized greetings."

    def get_input_schema(self) -> ToolSchema:
        return ToolSchema(
            properties={
                "name": PropertySchema(
                    type="string",
                    description="Optional name to include in the greeting",
                ),
            },
        )

    def execute(self, context: CapabilityContext) -> CapabilityResult:
        try:
            name = param_str(context.parameters, "name")
        except CapabilityInputError as e:
            return CapabilityResult.fail(f"Failed to generate greeting: {e}", error_code="HELLO_ERROR")

        # Direct callers often pass the name as the primary input
        if not name or not name.strip():
            name = context.input

        if not name or not name.strip():
            return CapabilityResult.ok("Hello! 👋 How can I help you today?")
        return CapabilityResult.ok(f"Hello, {name.strip()}! 👋 Nice to meet you!")

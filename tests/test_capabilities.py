"""Tests for the built-in capabilities and parameter helpers."""

from unittest.mock import patch

import pytest

from aide.capabilities import (
    CalculatorCapability,
    CapabilityContext,
    CapabilityInputError,
    CapabilityResult,
    HelloWorldCapability,
    SystemInfoCapability,
)
from aide.capabilities.base import param_bool, param_float, param_str
from aide.capabilities.calculator import format_number


class TestHelloWorld:
    """Tests for HelloWorldCapability."""

    def test_greets_primary_input(self):
        result = HelloWorldCapability().execute(CapabilityContext(input="Alice"))

        assert result.success
        assert "Hello, Alice" in result.output

    def test_name_parameter_wins(self):
        context = CapabilityContext(input="ignored", parameters={"name": "Bob"})

        result = HelloWorldCapability().execute(context)

        assert result.output == "Hello, Bob! 👋 Nice to meet you!"

    def test_generic_greeting(self):
        result = HelloWorldCapability().execute(CapabilityContext())

        assert result.output == "Hello! 👋 How can I help you today?"

    def test_bad_name_type_fails(self):
        result = HelloWorldCapability().execute(CapabilityContext(parameters={"name": ["a", "b"]}))

        assert not result.success
        assert result.error_code == "HELLO_ERROR"

    def test_schema_has_optional_name(self):
        schema = HelloWorldCapability().get_input_schema().to_dict()

        assert schema["type"] == "object"
        assert "name" in schema["properties"]
        assert schema["required"] == []


class TestCalculator:
    """Tests for CalculatorCapability."""

    @pytest.mark.parametrize("operation,a,b,expected", [
        ("add", 15, 27, "42"),
        ("subtract", 10, 4, "6"),
        ("multiply", 6, 7, "42"),
        ("divide", 7, 2, "3.5"),
        ("ADD", "1.5", "2", "3.5"),
    ])
    def test_operations(self, operation, a, b, expected):
        context = CapabilityContext(parameters={"operation": operation, "a": a, "b": b})

        result = CalculatorCapability().execute(context)

        assert result.success
        assert result.output == expected

    def test_data_carries_operands(self):
        context = CapabilityContext(parameters={"operation": "add", "a": 15, "b": 27})

        result = CalculatorCapability().execute(context)

        assert result.data == {"operation": "add", "a": 15.0, "b": 27.0, "result": 42.0}

    def test_division_by_zero(self):
        context = CapabilityContext(parameters={"operation": "divide", "a": 1, "b": 0})

        result = CalculatorCapability().execute(context)

        assert not result.success
        assert result.error_message == "Calculator error: division by zero"
        assert result.error_code == "CALC_ERROR"

    def test_unknown_operation(self):
        context = CapabilityContext(parameters={"operation": "modulo", "a": 1, "b": 2})

        result = CalculatorCapability().execute(context)

        assert not result.success
        assert "Unknown operation: modulo" in result.error_message

    def test_missing_operand(self):
        result = CalculatorCapability().execute(CapabilityContext(parameters={"operation": "add", "a": 1}))

        assert not result.success
        assert "'b' is required" in result.error_message

    def test_non_numeric_operand(self):
        context = CapabilityContext(parameters={"operation": "add", "a": "ten", "b": 1})

        result = CalculatorCapability().execute(context)

        assert not result.success
        assert result.error_code == "CALC_ERROR"

    @pytest.mark.parametrize("value,expected", [
        (42.0, "42"),
        (-3.0, "-3"),
        (0.1, "0.1"),
        (float("inf"), "inf"),
    ])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected


class TestSystemInfo:
    """Tests for SystemInfoCapability."""

    def test_report(self):
        result = SystemInfoCapability().execute(CapabilityContext())

        assert result.success
        assert result.output.startswith("=== System Information ===")
        assert "Processor Count:" in result.output
        assert result.data["python_version"]

    def test_os_error_becomes_failure(self):
        capability = SystemInfoCapability()

        with patch.object(SystemInfoCapability, "collect", side_effect=OSError("no /proc")):
            result = capability.execute(CapabilityContext())

        assert not result.success
        assert result.error_code == "SYSINFO_ERROR"
        assert "no /proc" in result.error_message


class TestCapabilityContract:
    """Tests for the base contract types."""

    def test_tool_definition(self):
        definition = CalculatorCapability().to_tool_definition()

        assert definition.name == "calculator"
        assert definition.input_schema.required == ("operation", "a", "b")

    def test_repr(self):
        assert repr(HelloWorldCapability()) == "<HelloWorldCapability name='hello_world'>"

    def test_result_constructors(self):
        ok = CapabilityResult.ok("fine", data={"x": 1})
        failed = CapabilityResult.fail("broken", error_code="E1")

        assert ok.success and ok.error_message is None
        assert not failed.success and failed.output is None
        assert failed.to_dict()["error_code"] == "E1"


class TestParameterHelpers:
    """Tests for param_str / param_float / param_bool."""

    def test_param_str(self):
        params = {"s": "text", "n": 3, "l": [1]}

        assert param_str(params, "s") == "text"
        assert param_str(params, "n") == "3"
        assert param_str(params, "missing", default="d") == "d"
        with pytest.raises(CapabilityInputError):
            param_str(params, "l")
        with pytest.raises(CapabilityInputError):
            param_str(params, "missing", required=True)

    def test_param_float(self):
        params = {"i": 2, "f": 2.5, "s": " 15 ", "b": True, "bad": "abc"}

        assert param_float(params, "i") == 2.0
        assert param_float(params, "f") == 2.5
        assert param_float(params, "s") == 15.0
        with pytest.raises(CapabilityInputError):
            param_float(params, "b")
        with pytest.raises(CapabilityInputError):
            param_float(params, "bad")

    def test_param_bool(self):
        params = {"t": True, "s": "FALSE", "n": 1}

        assert param_bool(params, "t") is True
        assert param_bool(params, "s") is False
        assert param_bool(params, "missing", default=True) is True
        with pytest.raises(CapabilityInputError) as exc_info:
            param_bool(params, "n")
        assert exc_info.value.key == "n"

"""
System Info capability - OS, architecture, memory and runtime details.

Useful for diagnostics and environment verification.
"""
import getpass
import os
import platform
import socket
import sys
from typing import Any, Dict, Optional

from aide.capabilities.base import Capability, CapabilityContext, CapabilityResult, ToolSchema
from aide.core.logging_config import LoggerMixin


def _peak_memory_mb() -> Optional[float]:
    """Peak resident set size of this process in MB (None where unsupported)."""
    try:
        import resource
    except ImportError:  # Windows
        return None
    usage = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports KiB, macOS reports bytes
    if sys.platform == "darwin":
        return round(usage / 1024 / 1024, 1)
    return round(usage / 1024, 1)


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


class SystemInfoCapability(Capability, LoggerMixin):
    """Reports information about the machine the assistant runs on."""

    name = "system_info"
    description = "Get information about the system including OS, architecture, memory, and runtime version."

    def get_input_schema(self) -> ToolSchema:
        return ToolSchema()

    def execute(self, context: CapabilityContext) -> CapabilityResult:
        try:
            info = self.collect()
        except OSError as e:
            self.logger.warning(f"System information unavailable: {e}")
            return CapabilityResult.fail(
                f"Failed to retrieve system information: {e}",
                error_code="SYSINFO_ERROR",
            )
        return CapabilityResult.ok(output=self.format_report(info), data=info)

    def collect(self) -> Dict[str, Any]:
        return {
            "os": platform.system(),
            "os_release": platform.release(),
            "os_version": platform.version(),
            "architecture": platform.machine(),
            "machine_name": socket.gethostname(),
            "processor_count": os.cpu_count(),
            "is_64bit": sys.maxsize > 2 ** 32,
            "python_implementation": platform.python_implementation(),
            "python_version": platform.python_version(),
            "peak_memory_mb": _peak_memory_mb(),
            "user": _current_user(),
            "current_directory": os.getcwd(),
        }

    @staticmethod
    def format_report(info: Dict[str, Any]) -> str:
        memory = info["peak_memory_mb"]
        lines = [
            "=== System Information ===",
            "",
            f"OS: {info['os']} {info['os_release']}",
            f"OS Version: {info['os_version']}",
            f"Architecture: {info['architecture']}",
            f"64-bit: {info['is_64bit']}",
            "",
            f"Machine Name: {info['machine_name']}",
            f"Processor Count: {info['processor_count']}",
            "",
            f"Python Runtime: {info['python_implementation']} {info['python_version']}",
            f"Peak Memory: {memory} MB" if memory is not None else "Peak Memory: n/a",
            "",
            f"User: {info['user']}",
            f"Current Directory: {info['current_directory']}",
        ]
        return "\n".join(lines)
